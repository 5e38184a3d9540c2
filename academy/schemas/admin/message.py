from pydantic import BaseModel


class CreateMessage(BaseModel):
    # empty text is rejected by the service with a 400
    message: str | None = None
    target_curriculum: str | None = None
    target_level: str | None = None
    target_language: str | None = None
    target_grade: str | None = None


class UpdateMessage(BaseModel):
    message: str | None = None
    is_active: bool | None = None
    target_curriculum: str | None = None
    target_level: str | None = None
    target_language: str | None = None
    target_grade: str | None = None
