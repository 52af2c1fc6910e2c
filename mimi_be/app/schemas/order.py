from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List, Optional, Literal
from datetime import datetime


OrderStatus = Literal["PENDING", "CONFIRMED", "SHIPPING", "COMPLETED", "CANCELLED"]
PaymentMethod = Literal["COD", "BANK_TRANSFER", "MOMO", "VNPAY"]


class OrderItemIn(BaseModel):
    productId: int
    # Missing or non-positive quantities are coerced to 1 by the order engine
    quantity: Optional[int] = None
    variantId: Optional[int] = None


class OrderCreate(BaseModel):
    buyerId: int
    shippingName: Optional[str] = None
    shippingPhone: Optional[str] = None
    shippingAddress: Optional[str] = None
    shippingEmail: Optional[str] = None
    shippingFee: Optional[Decimal] = Field(default=Decimal("0"), ge=0)
    discountAmount: Optional[Decimal] = Field(default=Decimal("0"), ge=0)
    paymentMethod: Optional[PaymentMethod] = "COD"
    note: Optional[str] = None
    items: List[OrderItemIn] = Field(default_factory=list)


class OrderStatusUpdate(BaseModel):
    status: Optional[OrderStatus] = None


class OrderItemOut(BaseModel):
    productId: int
    productName: Optional[str] = None
    imageUrl: Optional[str] = None
    quantity: int
    price: float
    lineTotal: float


class OrderOut(BaseModel):
    id: int
    createdAt: Optional[datetime] = None
    status: Optional[OrderStatus] = None
    paymentMethod: Optional[str] = None
    shippingName: Optional[str] = None
    shippingPhone: Optional[str] = None
    shippingAddress: Optional[str] = None
    shippingEmail: Optional[str] = None
    note: Optional[str] = None
    subtotal: float
    shippingFee: float
    discountAmount: float
    totalAmount: float
    items: List[OrderItemOut]
