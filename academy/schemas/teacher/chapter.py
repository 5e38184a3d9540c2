from typing import Annotated

from pydantic import BaseModel, Field


class CreateChapter(BaseModel):
    title: Annotated[str, Field(min_length=1)]
    description: str | None = None
    video_url: str | None = None
    is_free: bool = False


class UpdateChapter(BaseModel):
    title: str | None = Field(None, min_length=1)
    description: str | None = None
    video_url: str | None = None
    is_free: bool | None = None


class CreateAttachment(BaseModel):
    name: Annotated[str, Field(min_length=1)]
    url: Annotated[str, Field(min_length=1)]


class CreateActivity(BaseModel):
    title: Annotated[str, Field(min_length=1)]
    description: str | None = None


class GradeSubmission(BaseModel):
    corrected_image_url: Annotated[str, Field(min_length=1)]
    feedback: str | None = None
