from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, selectinload
from typing import List
from datetime import datetime
import logging

from app.config import get_settings
from app.models.user import User, get_db
from app.models.order import Order, OrderItem, ORDER_STATUS_TRANSITIONS
from app.models.product import Product
from app.schemas.order import (
    OrderCreate,
    OrderOut,
    OrderItemOut,
    OrderStatusUpdate,
)
from app.utils.pricing import compute_order_totals, normalize_quantity, to_decimal


logger = logging.getLogger(__name__)

router = APIRouter()


def map_order_to_out(order: Order) -> OrderOut:
    items = []
    for i in order.items:
        product = i.product
        items.append(
            OrderItemOut(
                productId=i.product_id,
                productName=product.name if product else None,
                imageUrl=product.cover_image if product else None,
                quantity=i.quantity,
                price=float(i.price),
                lineTotal=float(i.line_total),
            )
        )
    return OrderOut(
        id=order.id,
        createdAt=order.created_at,
        status=order.status,  # type: ignore
        paymentMethod=order.payment_method,
        shippingName=order.shipping_name,
        shippingPhone=order.shipping_phone,
        shippingAddress=order.shipping_address,
        shippingEmail=order.shipping_email,
        note=order.note,
        subtotal=float(order.total_amount or 0),
        shippingFee=float(order.shipping_fee or 0),
        discountAmount=float(order.discount_amount or 0),
        totalAmount=float(order.final_amount or 0),
        items=items,
    )


def _with_lines(query):
    return query.options(
        selectinload(Order.items).selectinload(OrderItem.product).selectinload(Product.images)
    )


# Create Order
@router.post("/", response_model=OrderOut)
def create_order(payload: OrderCreate, db: Session = Depends(get_db)):
    buyer = db.query(User).filter(User.id == payload.buyerId).first()
    if not buyer:
        raise HTTPException(status_code=404, detail="Buyer not found")

    if not payload.items:
        raise HTTPException(status_code=400, detail="Order must have at least one item")

    order_items = []
    for item in payload.items:
        product = db.query(Product).filter(Product.id == item.productId).first()
        if not product:
            raise HTTPException(status_code=404, detail=f"Product not found: {item.productId}")
        qty = normalize_quantity(item.quantity)
        if qty != item.quantity:
            logger.warning(
                "Coerced quantity %r to %d for product %s (buyer %s)",
                item.quantity, qty, product.id, buyer.id,
            )
        # Rent checkout is not supported; every line is priced as a purchase
        order_items.append(
            OrderItem(
                product=product,
                quantity=qty,
                price=to_decimal(product.buy_price),
                order_type="BUY",
                variant_id=None,
            )
        )

    subtotal, shipping_fee, discount, final_amount = compute_order_totals(
        ((oi.price, oi.quantity) for oi in order_items),
        shipping_fee=payload.shippingFee,
        discount_amount=payload.discountAmount,
    )

    order = Order(
        buyer_id=buyer.id,
        shipping_name=payload.shippingName if payload.shippingName is not None else buyer.full_name,
        shipping_phone=payload.shippingPhone if payload.shippingPhone is not None else buyer.phone_number,
        shipping_address=payload.shippingAddress if payload.shippingAddress is not None else "",
        shipping_email=payload.shippingEmail,
        note=payload.note,
        payment_method=payload.paymentMethod or "COD",
        total_amount=subtotal,
        shipping_fee=shipping_fee,
        discount_amount=discount,
        final_amount=final_amount,
        status="PENDING",
        items=order_items,
    )
    db.add(order)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(order)
    logger.info("Created order %s for buyer %s (final %s)", order.id, buyer.id, final_amount)
    return map_order_to_out(order)


# Get Buyer Orders
@router.get("/me", response_model=List[OrderOut])
def get_my_orders(buyerId: int = Query(...), db: Session = Depends(get_db)):
    orders = (
        _with_lines(db.query(Order))
        .filter(Order.buyer_id == buyerId)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
    return [map_order_to_out(o) for o in orders]


# Get Order by ID
@router.get("/{id}", response_model=OrderOut)
def get_order_by_id(id: int, db: Session = Depends(get_db)):
    order = _with_lines(db.query(Order)).filter(Order.id == id).first()
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return map_order_to_out(order)


# Update Order Status
@router.patch("/{id}/status")
def update_order_status(id: int, payload: OrderStatusUpdate, db: Session = Depends(get_db)):
    order = db.query(Order).filter(Order.id == id).first()
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    if payload.status is not None and payload.status != order.status:
        if get_settings().ENFORCE_ORDER_TRANSITIONS:
            allowed = ORDER_STATUS_TRANSITIONS.get(order.status or "PENDING", set())
            if payload.status not in allowed:
                raise HTTPException(
                    status_code=409,
                    detail=f"Cannot change order status from {order.status} to {payload.status}",
                )
        previous = order.status
        order.status = payload.status
        order.updated_at = datetime.now()
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info("Order %s status %s -> %s", order.id, previous, order.status)

    return {"success": True, "message": "Đã cập nhật trạng thái đơn hàng"}
