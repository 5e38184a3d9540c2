import uuid
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field


class CreateLiveStream(BaseModel):
    course_id: uuid.UUID
    title: Annotated[str, Field(min_length=1)]
    description: str | None = None
    meeting_url: Annotated[str, Field(min_length=1)]
    scheduled_at: datetime
    duration_minutes: Annotated[int, Field(ge=1)] = 60


class UpdateLiveStream(BaseModel):
    title: str | None = Field(None, min_length=1)
    description: str | None = None
    meeting_url: str | None = Field(None, min_length=1)
    scheduled_at: datetime | None = None
    duration_minutes: int | None = Field(None, ge=1)
