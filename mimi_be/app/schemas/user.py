from datetime import datetime
from pydantic import BaseModel, EmailStr


class UserCreate(BaseModel):
    username: str | None = None
    fullName: str
    email: EmailStr
    phoneNumber: str | None = None


class UserOut(BaseModel):
    id: int
    username: str | None = None
    fullName: str | None = None
    email: EmailStr | None = None
    phoneNumber: str | None = None
    role: str | None = None
    createdAt: datetime | None = None
