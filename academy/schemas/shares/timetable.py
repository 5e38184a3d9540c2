import uuid
from typing import Annotated

from pydantic import BaseModel, Field

from academy.core.enum import CurriculumType

HHMM = Annotated[str, Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")]


class CreateTimetable(BaseModel):
    image_url: Annotated[str, Field(min_length=1)]
    title: str | None = None
    description: str | None = None
    course_id: uuid.UUID | None = None
    target_curriculum: str | None = None
    target_curriculum_type: CurriculumType | None = None
    target_grade: str | None = None
    target_section: str | None = None
    day_of_week: int | None = Field(None, ge=0, le=6)
    start_time: HHMM | None = None
    end_time: HHMM | None = None


class UpdateTimetable(BaseModel):
    image_url: str | None = Field(None, min_length=1)
    title: str | None = None
    description: str | None = None
    course_id: uuid.UUID | None = None
    target_curriculum: str | None = None
    target_curriculum_type: CurriculumType | None = None
    target_grade: str | None = None
    target_section: str | None = None
    day_of_week: int | None = Field(None, ge=0, le=6)
    start_time: HHMM | None = None
    end_time: HHMM | None = None
