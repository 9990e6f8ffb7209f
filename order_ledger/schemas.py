from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, StrictBool, StrictFloat, StrictInt
from pydantic.alias_generators import to_camel

# Booleans pass through unchanged so the service can reject them
Amount = Union[StrictInt, StrictFloat, StrictBool, str]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class CreateOrderRequest(CamelModel):
    email: Optional[str] = None
    amount: Optional[Amount] = None


class CreateOrderAndPayRequest(CamelModel):
    email: Optional[str] = None
    amount: Optional[Amount] = None
    payment_amount: Optional[Amount] = None


class ApplyPaymentRequest(CamelModel):
    amount: Optional[Amount] = None


class PaymentOut(CamelModel):
    id: str
    amount: float
    order_id: str
    created_at: datetime
    updated_at: datetime


class OrderOut(CamelModel):
    id: str
    email: str
    original_amount: float
    balance: float
    created_at: datetime
    updated_at: datetime


class OrderWithPaymentsOut(OrderOut):
    payments: List[PaymentOut] = []


class OrderPage(CamelModel):
    orders: List[OrderOut]
    total_pages: int
    current_page: int


class PaymentResult(CamelModel):
    order: OrderWithPaymentsOut
    applied: bool
