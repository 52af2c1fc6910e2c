from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from app.models.user import get_db
from app.models.product import Category
from app.schemas.product import CategoryOut


router = APIRouter()


@router.get("/", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    """Return all categories sorted by name."""
    return db.query(Category).order_by(Category.name).all()
