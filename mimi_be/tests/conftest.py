import os
import tempfile
from datetime import datetime
from decimal import Decimal

import pytest

# Configure before any app module reads settings
_TMP = tempfile.mkdtemp(prefix="mimi-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP, 'test.db')}"
os.environ["PRODUCT_IMAGE_DIR"] = os.path.join(_TMP, "images")
os.environ["SEED_DEFAULT_DATA"] = "0"

from fastapi.testclient import TestClient  # noqa: E402

from app.main import app  # noqa: E402
from app.models.user import Base, engine, SessionLocal, User  # noqa: E402
from app.models.product import Category, Product, ProductImage  # noqa: E402
from app.models.order import Order, OrderItem  # noqa: E402
from app.utils.storage import IMAGE_ROOT  # noqa: E402


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    IMAGE_ROOT.mkdir(parents=True, exist_ok=True)
    for path in IMAGE_ROOT.iterdir():
        path.unlink()
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(full_name="Nguyễn Văn A", phone="0900000000"):
        counter["n"] += 1
        user = User(
            username=f"user{counter['n']}",
            full_name=full_name,
            email=f"user{counter['n']}@mimi.vn",
            phone_number=phone,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_category(db):
    def _make(name="Đồ chơi"):
        category = Category(name=name)
        db.add(category)
        db.commit()
        db.refresh(category)
        return category

    return _make


@pytest.fixture
def make_product(db):
    def _make(seller, category=None, buy_price="100000", name="Xe đẩy", images=()):
        product = Product(
            name=name,
            description="Còn mới",
            trade_type="BUY_ONLY",
            buy_price=Decimal(buy_price) if buy_price is not None else None,
            address_contact="TP.HCM",
            seller_id=seller.id,
            category_id=category.id if category is not None else None,
        )
        for pos, filename in enumerate(images):
            product.images.append(ProductImage(image_url=filename, is_thumbnail=(pos == 0), position=pos))
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def make_order(db):
    """Insert an order directly, bypassing the HTTP layer, with a fixed timestamp."""

    def _make(buyer, lines, status="PENDING", created_at=None):
        order = Order(
            buyer_id=buyer.id,
            status=status,
            created_at=created_at or datetime.now(),
            total_amount=Decimal("0"),
            shipping_fee=Decimal("0"),
            discount_amount=Decimal("0"),
            final_amount=Decimal("0"),
        )
        subtotal = Decimal("0")
        for product, qty in lines:
            price = Decimal(product.buy_price or 0)
            order.items.append(OrderItem(product_id=product.id, quantity=qty, price=price, order_type="BUY"))
            subtotal += price * qty
        order.total_amount = subtotal
        order.final_amount = subtotal
        db.add(order)
        db.commit()
        db.refresh(order)
        return order

    return _make
