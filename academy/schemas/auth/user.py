import uuid
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, EmailStr, Field

from academy.core.enum import Role


class UserCreate(BaseModel):
    email: EmailStr
    password: Annotated[str, Field(min_length=6, max_length=72)]
    full_name: Annotated[str, Field(min_length=1)]
    phone_number: str | None = None
    parent_phone_number: str | None = None
    curriculum: str | None = None
    curriculum_type: str | None = None
    level: str | None = None
    language: str | None = None
    grade: str | None = None


class LoginUser(BaseModel):
    email: EmailStr
    password: str


class UserOut(BaseModel):
    id: uuid.UUID
    email: EmailStr
    full_name: str
    role: Role
    phone_number: str | None = None
    curriculum: str | None = None
    curriculum_type: str | None = None
    level: str | None = None
    language: str | None = None
    grade: str | None = None
    balance: float
    points: int
    is_suspended: bool

    class Config:
        from_attributes = True


class EditUser(BaseModel):
    full_name: str | None = None
    email: EmailStr | None = None
    phone_number: str | None = None
    password: str | None = Field(None, min_length=6, max_length=72)
    role: Role | None = None
    curriculum: str | None = None
    curriculum_type: str | None = None
    level: str | None = None
    language: str | None = None
    grade: str | None = None


class SuspendUser(BaseModel):
    is_suspended: bool


class UpdateBalance(BaseModel):
    new_balance: Annotated[Decimal, Field(ge=0)]


class TeacherCreateAccount(UserCreate):
    phone_number: Annotated[str, Field(min_length=1)]
    confirm_password: str
