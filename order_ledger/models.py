from sqlalchemy import Column, DateTime, Float, ForeignKey, String
from sqlalchemy.orm import relationship

from order_ledger.database import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True)              # uuid4
    email = Column(String, nullable=False, index=True)     # normalized
    original_amount = Column(Float, nullable=False)
    balance = Column(Float, nullable=False)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    payments = relationship(
        "Payment",
        back_populates="order",
        order_by="Payment.created_at",
    )


class Payment(Base):
    __tablename__ = "payments"

    id = Column(String(36), primary_key=True)
    amount = Column(Float, nullable=False)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    order = relationship("Order", back_populates="payments")
