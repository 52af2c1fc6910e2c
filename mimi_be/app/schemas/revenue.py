from datetime import date
from pydantic import BaseModel


class RevenueOut(BaseModel):
    totalRevenue: float
    totalProductsSold: int
    period: str


class SoldProductOut(BaseModel):
    id: int
    name: str
    imageUrl: str
    quantity: int
    totalAmount: float
    soldDate: date
    category: str
    orderId: int
    orderStatus: str
