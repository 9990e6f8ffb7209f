"""Order/payment consistency rules: creation, payment application and listing."""
import math
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import structlog

from order_ledger.database import Store
from order_ledger.errors import (
    InsufficientBalanceError,
    LedgerError,
    NotFoundError,
    PaymentFailedError,
    ValidationError,
)
from order_ledger.models import Order, Payment
from order_ledger.normalizers import normalize_email, normalize_float
from order_ledger.schemas import OrderOut, OrderPage, OrderWithPaymentsOut, PaymentResult
from order_ledger.validators import is_positive_number, is_valid_email

logger = structlog.get_logger(__name__)

PAGE_SIZE = 10
MAX_PAGE_LIMIT = 100
# Largest LIMIT/OFFSET the store accepts (signed 64-bit)
MAX_SQL_INTEGER = 2**63 - 1
DUPLICATE_PAYMENT_WINDOW = timedelta(seconds=30)

SORT_COLUMNS = {
    "createdAt": Order.created_at,
    "updatedAt": Order.updated_at,
    "originalAmount": Order.original_amount,
    "balance": Order.balance,
}
DEFAULT_SORT_FIELD = "createdAt"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def _parse_int(value: Any) -> Optional[int]:
    if _is_missing(value) or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value) if math.isfinite(value) else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    offset: int
    sort_by: str
    descending: bool


def resolve_pagination(
    page: Any = None,
    limit: Any = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
) -> Pagination:
    # Missing, zero or garbage page numbers all mean the first page
    page_number = _parse_int(page) or 1

    if _is_missing(limit):
        page_limit = PAGE_SIZE
    else:
        page_limit = _parse_int(limit)
        if not page_limit or page_limit <= 0 or page_limit > MAX_SQL_INTEGER:
            page_limit = MAX_PAGE_LIMIT

    sort_field = sort_by if sort_by in SORT_COLUMNS else DEFAULT_SORT_FIELD

    return Pagination(
        page=page_number,
        limit=page_limit,
        offset=(page_number - 1) * page_limit,
        sort_by=sort_field,
        descending=sort_order == "desc",
    )


def _parse_amount(amount: Any, message: str) -> float:
    if _is_missing(amount):
        raise ValidationError(message)
    value = normalize_float(amount)
    if not is_positive_number(value):
        raise ValidationError(message)
    return value


class OrderService:
    def __init__(
        self,
        store: Store,
        payment_processor,
        duplicate_window: timedelta = DUPLICATE_PAYMENT_WINDOW,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.payment_processor = payment_processor
        self.duplicate_window = duplicate_window
        self.clock = clock or _utcnow

    def _create_order(self, db, email: Any, amount: Any, now: datetime) -> Order:
        if not is_valid_email(email):
            raise ValidationError("Invalid email format")

        original_amount = _parse_amount(amount, "Amount must be a positive number")
        if original_amount == 0:
            raise ValidationError("Amount must be a positive number")

        order = Order(
            id=str(uuid.uuid4()),
            email=normalize_email(email),
            original_amount=original_amount,
            balance=original_amount,
            created_at=now,
            updated_at=now,
        )
        db.add(order)
        db.flush()
        return order

    def create_order(self, email: Any, amount: Any) -> OrderOut:
        with self.store.transaction() as db:
            order = self._create_order(db, email, amount, self.clock())
            result = OrderOut.model_validate(order)

        logger.info("order_created", order_id=result.id, amount=result.original_amount)
        return result

    def get_order(self, order_id: Optional[str]) -> OrderWithPaymentsOut:
        if not order_id:
            raise ValidationError("Order ID is required")

        with self.store.session() as db:
            order = db.get(Order, order_id)
            if order is None:
                raise NotFoundError("Order not found")
            return OrderWithPaymentsOut.model_validate(order)

    def list_orders(
        self,
        email: Any,
        page: Any = None,
        limit: Any = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> OrderPage:
        if not is_valid_email(email):
            raise ValidationError("Invalid email format")

        pagination = resolve_pagination(page, limit, sort_by, sort_order)
        if pagination.page <= 0 or pagination.offset > MAX_SQL_INTEGER:
            raise ValidationError("Invalid page number")

        column = SORT_COLUMNS[pagination.sort_by]
        with self.store.session() as db:
            query = db.query(Order).filter(Order.email == normalize_email(email))
            total = query.count()
            orders = (
                query.order_by(column.desc() if pagination.descending else column.asc())
                .offset(pagination.offset)
                .limit(pagination.limit)
                .all()
            )
            return OrderPage(
                orders=[OrderOut.model_validate(order) for order in orders],
                total_pages=math.ceil(total / pagination.limit),
                current_page=pagination.page,
            )

    def create_order_and_pay(
        self, email: Any, amount: Any, payment_amount: Any
    ) -> OrderWithPaymentsOut:
        """Create an order and charge it once, all or nothing.

        The payment amount is not checked against the order amount, so the
        balance can end up negative here.
        """
        now = self.clock()
        try:
            with self.store.transaction() as db:
                order = self._create_order(db, email, amount, now)
                paid = _parse_amount(
                    payment_amount, "Payment amount must be a non-negative number"
                )

                if not self.payment_processor.authorize(order.id, paid):
                    raise PaymentFailedError("Payment failed")

                db.add(
                    Payment(
                        id=str(uuid.uuid4()),
                        amount=paid,
                        order_id=order.id,
                        created_at=now,
                        updated_at=now,
                    )
                )
                order.balance = normalize_float(order.balance - paid)
                order.updated_at = now
                db.flush()
                db.refresh(order)
                result = OrderWithPaymentsOut.model_validate(order)
        except LedgerError as exc:
            logger.warning("create_and_pay_failed", error=str(exc))
            raise

        logger.info(
            "order_created_and_paid",
            order_id=result.id,
            amount=paid,
            balance=result.balance,
        )
        return result

    def apply_payment(self, order_id: Optional[str], amount: Any) -> PaymentResult:
        if not order_id:
            raise ValidationError("Order ID is required")
        paid = _parse_amount(amount, "Amount must be a non-negative number")

        now = self.clock()
        with self.store.transaction() as db:
            order = db.get(Order, order_id)
            if order is None:
                raise NotFoundError("Order not found")

            duplicate = (
                db.query(Payment)
                .filter(
                    Payment.order_id == order.id,
                    Payment.amount == paid,
                    Payment.created_at >= now - self.duplicate_window,
                )
                .first()
            )
            if duplicate is not None:
                logger.info(
                    "duplicate_payment_ignored",
                    order_id=order.id,
                    payment_id=duplicate.id,
                    amount=paid,
                )
                return PaymentResult(
                    order=OrderWithPaymentsOut.model_validate(order), applied=False
                )

            db.add(
                Payment(
                    id=str(uuid.uuid4()),
                    amount=paid,
                    order_id=order.id,
                    created_at=now,
                    updated_at=now,
                )
            )
            order.balance = normalize_float(order.balance - paid)
            if order.balance < 0:
                logger.warning("insufficient_balance", order_id=order.id, amount=paid)
                raise InsufficientBalanceError("Insufficient balance")
            order.updated_at = now

            db.flush()
            db.refresh(order)
            result = PaymentResult(
                order=OrderWithPaymentsOut.model_validate(order), applied=True
            )

        logger.info(
            "payment_applied", order_id=order_id, amount=paid, balance=result.order.balance
        )
        return result
