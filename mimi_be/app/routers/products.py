from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Body
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session
from typing import List, Optional
from decimal import Decimal
import logging

from app.config import get_settings
from app.models.user import User, get_db
from app.models.product import Product, ProductImage, Category
from app.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductOut,
    ProductImageOut,
)
from app.utils.storage import (
    delete_image_file,
    delete_image_files,
    resolve_image_path,
    save_multiple_upload_files,
    sweep_orphan_files,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Helpers

def _positive(value: Optional[Decimal]) -> bool:
    return value is not None and value > 0


def validate_prices(trade_type: str, buy_price: Optional[Decimal], rent_price: Optional[Decimal]) -> Optional[str]:
    """Return an error message when the prices don't fit the trade type, else None."""
    if trade_type == "BUY_ONLY" and not _positive(buy_price):
        return "Giá bán phải lớn hơn 0"
    if trade_type == "RENT_ONLY" and not _positive(rent_price):
        return "Giá thuê phải lớn hơn 0"
    if trade_type == "BOTH" and not (_positive(buy_price) or _positive(rent_price)):
        return "Cần có ít nhất một giá (bán hoặc thuê) lớn hơn 0"
    return None


def _validate_payload(payload) -> None:
    if not payload.name or not payload.name.strip():
        raise HTTPException(status_code=400, detail="Tên sản phẩm không được để trống")
    if not payload.description or not payload.description.strip():
        raise HTTPException(status_code=400, detail="Mô tả sản phẩm không được để trống")
    if not payload.addressContact or not payload.addressContact.strip():
        raise HTTPException(status_code=400, detail="Địa chỉ không được để trống")
    price_error = validate_prices(payload.tradeType, payload.buyPrice, payload.rentPrice)
    if price_error:
        raise HTTPException(status_code=400, detail=price_error)


def _get_product_or_404(db: Session, product_id: int, lock: bool = False) -> Product:
    query = db.query(Product).filter(Product.id == product_id)
    if lock:
        query = query.with_for_update()
    product = query.first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


def _get_category_or_404(db: Session, category_id: Optional[int]) -> Category:
    if category_id is None:
        raise HTTPException(status_code=400, detail="Danh mục sản phẩm là bắt buộc")
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail="Danh mục sản phẩm không tồn tại trong hệ thống")
    return category


def to_product_out(p: Product) -> ProductOut:
    return ProductOut(
        id=p.id,
        name=p.name,
        description=p.description,
        conditionPercentage=p.condition_percentage,
        tradeType=p.trade_type,
        buyPrice=float(p.buy_price) if p.buy_price is not None else None,
        rentPrice=float(p.rent_price) if p.rent_price is not None else None,
        rentUnit=p.rent_unit,
        status=p.status,
        addressContact=p.address_contact,
        featured=p.featured,
        isNew=p.is_new,
        createdAt=p.created_at,
        sellerId=p.seller.id if p.seller else None,
        sellerName=p.seller.full_name if p.seller else None,
        categoryId=p.category.id if p.category else None,
        categoryName=p.category.name if p.category else None,
        images=[img.image_url for img in p.images],
    )


def to_image_out(img: ProductImage) -> ProductImageOut:
    return ProductImageOut(
        id=img.id,
        productId=img.product_id,
        imageUrl=img.image_url,
        isThumbnail=img.is_thumbnail,
    )


def promote_next_thumbnail(product: Product) -> Optional[ProductImage]:
    """Make the lowest-positioned image the thumbnail if none is marked."""
    if any(img.is_thumbnail for img in product.images):
        return None
    if not product.images:
        return None
    nxt = min(product.images, key=lambda img: (img.position, img.id))
    nxt.is_thumbnail = True
    return nxt


# Get All Products
@router.get("/", response_model=List[ProductOut])
def get_all_products(db: Session = Depends(get_db)):
    products = db.query(Product).order_by(Product.id).all()
    return [to_product_out(p) for p in products]


# Upload images (files only; linking to a product is a separate call)
@router.post("/upload-images", response_model=List[str])
def upload_images(files: List[UploadFile] = File(...)):
    names = save_multiple_upload_files(files)
    if not names:
        raise HTTPException(status_code=400, detail="No files provided")
    return names


# Serve an image by file name
@router.get("/images/{filename}")
def get_image(filename: str):
    path = resolve_image_path(filename)
    if path is None or not path.is_file():
        raise HTTPException(status_code=404, detail="Image not found")
    return FileResponse(path)


# Remove uploaded files that never got linked to a product
@router.post("/images/sweep")
def sweep_orphan_images(db: Session = Depends(get_db)):
    referenced = [row[0] for row in db.query(ProductImage.image_url).all()]
    removed = sweep_orphan_files(referenced, get_settings().ORPHAN_IMAGE_GRACE_MINUTES)
    return {"removed": len(removed)}


# Get Products of a seller
@router.get("/user/{userId}", response_model=List[ProductOut])
def get_user_products(userId: int, db: Session = Depends(get_db)):
    products = db.query(Product).filter(Product.seller_id == userId).order_by(Product.id).all()
    return [to_product_out(p) for p in products]


# Get Product by ID
@router.get("/{id}", response_model=ProductOut)
def get_product_by_id(id: int, db: Session = Depends(get_db)):
    return to_product_out(_get_product_or_404(db, id))


# Create Product
@router.post("/", response_model=ProductOut)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    _validate_payload(payload)

    if payload.sellerId is None:
        raise HTTPException(status_code=400, detail="Người bán là bắt buộc")
    seller = db.query(User).filter(User.id == payload.sellerId).first()
    if not seller:
        raise HTTPException(status_code=404, detail="Người bán không tồn tại")
    category = _get_category_or_404(db, payload.categoryId)

    product = Product(
        name=payload.name.strip(),
        description=payload.description,
        condition_percentage=payload.conditionPercentage,
        trade_type=payload.tradeType,
        buy_price=payload.buyPrice,
        rent_price=payload.rentPrice,
        rent_unit=payload.rentUnit,
        status=payload.status or "ACTIVE",
        address_contact=payload.addressContact,
        featured=bool(payload.featured),
        is_new=bool(payload.isNew),
        seller=seller,
        category=category,
    )
    db.add(product)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(product)
    logger.info("Created product %s for seller %s", product.id, seller.id)
    return to_product_out(product)


# Update Product
@router.put("/{id}", response_model=ProductOut)
def update_product(id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    product = _get_product_or_404(db, id)
    _validate_payload(payload)

    product.name = payload.name.strip()
    product.description = payload.description
    product.condition_percentage = payload.conditionPercentage
    product.trade_type = payload.tradeType
    product.buy_price = payload.buyPrice
    product.rent_price = payload.rentPrice
    product.rent_unit = payload.rentUnit
    product.status = payload.status or product.status
    product.address_contact = payload.addressContact
    product.featured = bool(payload.featured)
    product.is_new = bool(payload.isNew)
    if payload.categoryId is not None:
        product.category = _get_category_or_404(db, payload.categoryId)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(product)
    return to_product_out(product)


# Delete Product
@router.delete("/{id}")
def delete_product(id: int, db: Session = Depends(get_db)):
    product = _get_product_or_404(db, id)
    filenames = [img.image_url for img in product.images]
    db.delete(product)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    # Files go only after the row is gone, so a refused delete keeps its images
    delete_image_files(filenames)
    return {"message": "Product deleted"}


# Link uploaded file names to a product
@router.post("/{id}/images", response_model=List[ProductImageOut])
def save_product_image_names(id: int, filenames: List[str] = Body(...), db: Session = Depends(get_db)):
    product = _get_product_or_404(db, id, lock=True)
    if not filenames:
        raise HTTPException(status_code=400, detail="Image filenames are required")

    has_thumbnail = any(img.is_thumbnail for img in product.images)
    next_position = max((img.position for img in product.images), default=-1) + 1

    created: List[ProductImage] = []
    for name in filenames:
        if name is None or not name.strip():
            continue
        img = ProductImage(
            image_url=name.strip(),
            is_thumbnail=not has_thumbnail and not created,
            position=next_position,
        )
        product.images.append(img)
        created.append(img)
        next_position += 1

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    for img in created:
        db.refresh(img)
    logger.info("Linked %d image(s) to product %s", len(created), product.id)
    return [to_image_out(img) for img in created]


# Delete an image of a product
@router.delete("/{productId}/images/{filename}")
def delete_product_image(productId: int, filename: str, db: Session = Depends(get_db)):
    product = _get_product_or_404(db, productId, lock=True)
    image = next((img for img in product.images if img.image_url == filename), None)
    if image is None:
        raise HTTPException(status_code=404, detail="Image not found")

    was_thumbnail = image.is_thumbnail
    product.images.remove(image)
    promoted = promote_next_thumbnail(product) if was_thumbnail else None
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    delete_image_file(filename)
    if promoted is not None:
        logger.info("Promoted %s to thumbnail of product %s", promoted.image_url, product.id)
    return {"message": "Image deleted"}
