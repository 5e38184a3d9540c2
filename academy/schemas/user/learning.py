from typing import Any

from pydantic import BaseModel


class SubmitImage(BaseModel):
    # missing image is a 400 from the service, not a 422
    image_url: str | None = None


class SubmitQuiz(BaseModel):
    answers: dict[str, Any] = {}
