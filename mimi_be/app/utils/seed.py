import logging
from sqlalchemy.orm import Session

from app.models.user import User
from app.models.product import Category

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    "Đồ chơi", "Quần áo", "Giày dép", "Xe đẩy",
    "Bình sữa", "Tã bỉm", "Sữa bột", "Nôi cũi",
    "Ghế ăn dặm", "Đồ dùng tắm",
]


def seed_default_data(db: Session) -> None:
    """Insert the admin user and category list into empty tables. Idempotent."""
    if db.query(User).count() == 0:
        db.add(User(username="admin", full_name="Admin User", email="admin@mimi.com", role="ADMIN"))
        logger.info("Seeded default admin user")
    if db.query(Category).count() == 0:
        db.add_all([Category(name=name) for name in DEFAULT_CATEGORIES])
        logger.info("Seeded %d categories", len(DEFAULT_CATEGORIES))
    db.commit()
