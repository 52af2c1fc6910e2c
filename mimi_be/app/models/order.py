from decimal import Decimal
from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from app.models.user import Base


# Statuses that count as sold for revenue purposes
SOLD_STATUSES = ("PENDING", "CONFIRMED", "SHIPPING", "COMPLETED")

# Legal moves when ENFORCE_ORDER_TRANSITIONS is on
ORDER_STATUS_TRANSITIONS = {
    "PENDING": {"CONFIRMED", "CANCELLED"},
    "CONFIRMED": {"SHIPPING", "CANCELLED"},
    "SHIPPING": {"COMPLETED"},
    "COMPLETED": set(),
    "CANCELLED": set(),
}


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    buyer_id = Column(
        Integer, ForeignKey("users.id", name="fk_orders_buyer_id"), nullable=False, index=True
    )

    shipping_name = Column(String(255))
    shipping_phone = Column(String(50))
    shipping_address = Column(String(500))
    shipping_email = Column(String(255))
    note = Column(String(1000))

    payment_method = Column(String(50), default="COD")  # COD, BANK_TRANSFER, MOMO, VNPAY
    total_amount = Column(Numeric(12, 2), default=0)  # subtotal of item lines
    shipping_fee = Column(Numeric(12, 2), default=0)
    discount_amount = Column(Numeric(12, 2), default=0)
    final_amount = Column(Numeric(12, 2), default=0)
    status = Column(String(20), default="PENDING")  # PENDING, CONFIRMED, SHIPPING, COMPLETED, CANCELLED

    created_at = Column(DateTime, default=datetime.now, index=True)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    buyer = relationship("User")
    items = relationship(
        "OrderItem", back_populates="order", cascade="all, delete-orphan", order_by="OrderItem.id"
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(
        Integer, ForeignKey("orders.id", name="fk_order_items_order_id"), nullable=False, index=True
    )
    product_id = Column(
        Integer, ForeignKey("products.id", name="fk_order_items_product_id"), nullable=False, index=True
    )
    variant_id = Column(Integer)  # not resolved yet, always NULL
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)  # unit price at time of order
    order_type = Column(String(10), default="BUY")

    order = relationship("Order", back_populates="items")
    product = relationship("Product")

    @property
    def line_total(self) -> Decimal:
        return Decimal(self.price or 0) * int(self.quantity or 0)
