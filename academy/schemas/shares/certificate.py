import uuid
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field


class CreateCertificate(BaseModel):
    student_id: uuid.UUID
    image_url: Annotated[str, Field(min_length=1)]
    title: str | None = None
    description: str | None = None


class CertificateOut(BaseModel):
    id: uuid.UUID
    student_id: uuid.UUID
    student_name: str | None = None
    assigned_by: uuid.UUID | None = None
    assigned_by_name: str | None = None
    image_url: str
    title: str | None = None
    description: str | None = None
    created_at: datetime
