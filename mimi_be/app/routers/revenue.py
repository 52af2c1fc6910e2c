from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, contains_eager
from typing import List, Optional
from datetime import date
from decimal import Decimal

from app.models.user import get_db
from app.models.order import Order, OrderItem, SOLD_STATUSES
from app.models.product import Product
from app.schemas.revenue import RevenueOut, SoldProductOut
from app.utils.revenue import (
    UNCATEGORIZED_LABEL,
    category_matches,
    day_bounds,
    format_period,
)


router = APIRouter()


def _sold_items_base(db: Session, seller_id: int):
    # Shared by the all-time and ranged paths so inclusion rules stay identical
    return (
        db.query(OrderItem)
        .join(OrderItem.order)
        .join(OrderItem.product)
        .options(contains_eager(OrderItem.order), contains_eager(OrderItem.product))
        .filter(Product.seller_id == seller_id)
        .filter(Order.status.in_(SOLD_STATUSES))
    )


def find_all_sold_items(db: Session, seller_id: int) -> List[OrderItem]:
    return (
        _sold_items_base(db, seller_id)
        .order_by(Order.created_at.desc(), OrderItem.id.desc())
        .all()
    )


def find_sold_items_in_range(db: Session, seller_id: int, start_date: Optional[date], end_date: Optional[date]) -> List[OrderItem]:
    start_dt, end_dt = day_bounds(start_date, end_date)
    query = _sold_items_base(db, seller_id)
    if start_dt is not None:
        query = query.filter(Order.created_at >= start_dt)
    if end_dt is not None:
        query = query.filter(Order.created_at <= end_dt)
    return query.order_by(Order.created_at.desc(), OrderItem.id.desc()).all()


def get_sold_items_for_seller(
    db: Session,
    seller_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    category: Optional[str] = None,
) -> List[OrderItem]:
    if start_date is None and end_date is None:
        items = find_all_sold_items(db, seller_id)
    else:
        items = find_sold_items_in_range(db, seller_id, start_date, end_date)
    if category:
        items = [
            i for i in items
            if i.product is not None
            and i.product.category is not None
            and category_matches(i.product.category.name, category)
        ]
    return items


def to_sold_product_out(item: OrderItem) -> SoldProductOut:
    product = item.product
    order = item.order
    return SoldProductOut(
        id=product.id,
        name=product.name,
        imageUrl=product.cover_image or "",
        quantity=item.quantity,
        totalAmount=float(item.line_total),
        soldDate=order.created_at.date(),
        category=product.category.name if product.category else UNCATEGORIZED_LABEL,
        orderId=order.id,
        # Persisted orders should always carry a status
        orderStatus=order.status or "PENDING",
    )


# Revenue summary for a seller
@router.get("/summary", response_model=RevenueOut)
def get_revenue_summary(
    userId: int = Query(...),
    startDate: Optional[date] = None,
    endDate: Optional[date] = None,
    category: Optional[str] = None,
    db: Session = Depends(get_db),
):
    items = get_sold_items_for_seller(db, userId, startDate, endDate, category)
    total_revenue = sum((i.line_total for i in items), Decimal("0"))
    total_sold = sum(i.quantity for i in items)
    return RevenueOut(
        totalRevenue=float(total_revenue),
        totalProductsSold=total_sold,
        period=format_period(startDate, endDate),
    )


# Sold line items for a seller
@router.get("/sold-products", response_model=List[SoldProductOut])
def get_sold_products(
    userId: int = Query(...),
    startDate: Optional[date] = None,
    endDate: Optional[date] = None,
    category: Optional[str] = None,
    db: Session = Depends(get_db),
):
    items = get_sold_items_for_seller(db, userId, startDate, endDate, category)
    return [to_sold_product_out(i) for i in items]
