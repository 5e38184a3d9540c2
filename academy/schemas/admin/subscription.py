import uuid
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, Field


class ReviewRequest(BaseModel):
    action: Literal["approve", "deny"]


class CreatePlan(BaseModel):
    name: Annotated[str, Field(min_length=1)]
    description: str | None = None
    price: Annotated[Decimal, Field(ge=0)] = Decimal("0")
    duration_days: Annotated[int, Field(ge=1)] = 30
    curriculum: Annotated[str, Field(min_length=1)]
    grade: Annotated[str, Field(min_length=1)]
    level: str | None = None
    language: str | None = None
    is_active: bool = True


class UpdatePlan(BaseModel):
    name: str | None = Field(None, min_length=1)
    description: str | None = None
    price: Decimal | None = Field(None, ge=0)
    duration_days: int | None = Field(None, ge=1)
    curriculum: str | None = None
    grade: str | None = None
    level: str | None = None
    language: str | None = None
    is_active: bool | None = None


class GrantAccess(BaseModel):
    user_id: uuid.UUID | None = None
