from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.models.user import User, get_db
from app.schemas.user import UserCreate, UserOut


router = APIRouter()


def _to_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        username=user.username,
        fullName=user.full_name,
        email=user.email,
        phoneNumber=user.phone_number,
        role=user.role,
        createdAt=user.created_at,
    )


@router.post("/", response_model=UserOut)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    if db.query(User).filter(User.email == payload.email).first():
        raise HTTPException(status_code=409, detail="Email đã được sử dụng")
    user = User(
        username=payload.username,
        full_name=payload.fullName,
        email=payload.email,
        phone_number=payload.phoneNumber,
        role="USER",
    )
    db.add(user)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    return _to_out(user)


@router.get("/{id}", response_model=UserOut)
def get_user(id: int, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.id == id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return _to_out(user)
