from decimal import Decimal
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Literal

TradeType = Literal["BUY_ONLY", "RENT_ONLY", "BOTH"]
RentUnit = Literal["DAY", "WEEK", "MONTH"]
ProductStatus = Literal["ACTIVE", "SOLD", "RENTED", "INACTIVE"]


class ProductBase(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    conditionPercentage: Optional[int] = Field(default=100, ge=0, le=100)
    tradeType: TradeType = "BUY_ONLY"
    buyPrice: Optional[Decimal] = None
    rentPrice: Optional[Decimal] = None
    rentUnit: Optional[RentUnit] = None
    status: Optional[ProductStatus] = "ACTIVE"
    addressContact: Optional[str] = None
    featured: Optional[bool] = False
    isNew: Optional[bool] = False


class ProductCreate(ProductBase):
    sellerId: Optional[int] = None
    categoryId: Optional[int] = None


class ProductUpdate(ProductBase):
    categoryId: Optional[int] = None


class ProductOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    conditionPercentage: Optional[int] = None
    tradeType: Optional[str] = None
    buyPrice: Optional[float] = None
    rentPrice: Optional[float] = None
    rentUnit: Optional[str] = None
    status: Optional[str] = None
    addressContact: Optional[str] = None
    featured: Optional[bool] = None
    isNew: Optional[bool] = None
    createdAt: Optional[datetime] = None
    sellerId: Optional[int] = None
    sellerName: Optional[str] = None
    categoryId: Optional[int] = None
    categoryName: Optional[str] = None
    images: List[str] = Field(default_factory=list)


class ProductImageOut(BaseModel):
    id: int
    productId: int
    imageUrl: str
    isThumbnail: bool


class CategoryOut(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)
