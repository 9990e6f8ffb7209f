from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from order_ledger.errors import (
    InsufficientBalanceError,
    NotFoundError,
    ValidationError,
)
from order_ledger.schemas import (
    ApplyPaymentRequest,
    CreateOrderAndPayRequest,
    CreateOrderRequest,
    OrderOut,
    OrderPage,
    OrderWithPaymentsOut,
)
from order_ledger.service import OrderService

logger = structlog.get_logger(__name__)

router = APIRouter()


def get_order_service(request: Request) -> OrderService:
    return request.app.state.order_service


def _internal_error(exc: Exception) -> HTTPException:
    logger.error("request_failed", error=str(exc), error_type=type(exc).__name__)
    return HTTPException(status_code=500, detail="Internal Server Error")


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/orders", response_model=OrderPage)
def list_orders(
    email: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    service: OrderService = Depends(get_order_service),
):
    try:
        return service.list_orders(email, page, limit, sort_by, sort_order)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:
        raise _internal_error(exc)


@router.post(
    "/orders", response_model=OrderOut, status_code=status.HTTP_201_CREATED
)
def create_order(
    request: CreateOrderRequest,
    service: OrderService = Depends(get_order_service),
):
    # Validation failures are reported as 500 on this route, unlike create-and-pay
    try:
        return service.create_order(request.email, request.amount)
    except Exception as exc:
        raise _internal_error(exc)


@router.post(
    "/orders/create-and-pay",
    response_model=OrderWithPaymentsOut,
    status_code=status.HTTP_201_CREATED,
)
def create_order_and_pay(
    request: CreateOrderAndPayRequest,
    service: OrderService = Depends(get_order_service),
):
    try:
        return service.create_order_and_pay(
            request.email, request.amount, request.payment_amount
        )
    except Exception as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.get("/orders/{order_id}", response_model=OrderWithPaymentsOut)
def get_order(order_id: str, service: OrderService = Depends(get_order_service)):
    try:
        return service.get_order(order_id)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except Exception as exc:
        raise _internal_error(exc)


@router.post(
    "/orders/{order_id}/payment",
    response_model=OrderWithPaymentsOut,
    status_code=status.HTTP_201_CREATED,
)
def apply_payment(
    order_id: str,
    request: ApplyPaymentRequest,
    service: OrderService = Depends(get_order_service),
):
    try:
        result = service.apply_payment(order_id, request.amount)
    except (ValidationError, InsufficientBalanceError) as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except Exception as exc:
        raise _internal_error(exc)

    if not result.applied:
        return JSONResponse(
            status_code=200,
            content={
                "message": "Payment already applied",
                "order": jsonable_encoder(result.order, by_alias=True),
            },
        )
    return result.order
