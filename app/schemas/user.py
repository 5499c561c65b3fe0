from typing import Optional

from pydantic import EmailStr, Field

from app.models.enums import UserRole
from app.schemas.base import CamelModel


class UserBase(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = None


class UserCreate(UserBase):
    password: str = Field(min_length=6)


class AdminCreate(UserCreate):
    signup_code: str


class UserLogin(CamelModel):
    email: EmailStr
    password: str


class UserOut(UserBase):
    id: int
    role: UserRole


class UserSummary(CamelModel):
    id: int
    name: str
    email: str


class AuthOut(CamelModel):
    user: UserOut
    token: str


class UserEnvelope(CamelModel):
    user: UserOut


class UserList(CamelModel):
    users: list[UserOut]
    count: int
