import uuid
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field

from academy.core.enum import ContentType


class CreateCourse(BaseModel):
    title: Annotated[str, Field(min_length=1)]
    description: str | None = None
    image_url: str | None = None
    price: Annotated[Decimal, Field(ge=0)] = Decimal("0")
    is_free: bool = False
    target_curriculum: str | None = None
    target_level: str | None = None
    target_language: str | None = None
    target_grade: str | None = None


class UpdateCourse(BaseModel):
    title: str | None = Field(None, min_length=1)
    description: str | None = None
    image_url: str | None = None
    price: Decimal | None = Field(None, ge=0)
    is_free: bool | None = None
    target_curriculum: str | None = None
    target_level: str | None = None
    target_language: str | None = None
    target_grade: str | None = None


class PublishSchema(BaseModel):
    is_published: bool


class ReorderItem(BaseModel):
    id: uuid.UUID
    position: Annotated[int, Field(ge=1)]
    type: ContentType


class ReorderSchema(BaseModel):
    list: list[ReorderItem]
