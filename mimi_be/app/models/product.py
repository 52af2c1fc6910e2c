from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from app.models.user import Base


class Category(Base):
    __tablename__ = "categories"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)

    products = relationship("Product", back_populates="category")


class ProductImage(Base):
    __tablename__ = "product_images"
    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(
        Integer,
        ForeignKey("products.id", name="fk_product_images_product_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    image_url = Column(String(255), nullable=False)  # file name only
    is_thumbnail = Column(Boolean, default=False, nullable=False)
    position = Column(Integer, default=0, nullable=False)

    product = relationship("Product", back_populates="images")


class Product(Base):
    __tablename__ = "products"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String(2000))
    condition_percentage = Column(Integer, default=100)
    trade_type = Column(String(20), default="BUY_ONLY")  # BUY_ONLY, RENT_ONLY, BOTH
    buy_price = Column(Numeric(12, 2))
    rent_price = Column(Numeric(12, 2))
    rent_unit = Column(String(10))  # DAY, WEEK, MONTH
    status = Column(String(20), default="ACTIVE")  # ACTIVE, SOLD, RENTED, INACTIVE
    address_contact = Column(String(500))
    featured = Column(Boolean, default=False)
    is_new = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.now)

    seller_id = Column(
        Integer, ForeignKey("users.id", name="fk_products_seller_id"), nullable=False, index=True
    )
    category_id = Column(
        Integer, ForeignKey("categories.id", name="fk_products_category_id"), nullable=True, index=True
    )

    seller = relationship("User", back_populates="products")
    category = relationship("Category", back_populates="products")
    images = relationship(
        "ProductImage",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by=[ProductImage.position, ProductImage.id],
    )

    @property
    def cover_image(self):
        """Thumbnail file name, else the first image, else None."""
        for img in self.images:
            if img.is_thumbnail:
                return img.image_url
        return self.images[0].image_url if self.images else None
