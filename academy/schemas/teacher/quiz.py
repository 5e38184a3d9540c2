from typing import Annotated

from pydantic import BaseModel, Field


class QuizQuestion(BaseModel):
    text: Annotated[str, Field(min_length=1)]
    options: list[str] = []
    correct_answer: Annotated[str, Field(min_length=1)]
    points: Annotated[int, Field(ge=1)] = 1


class CreateQuiz(BaseModel):
    title: Annotated[str, Field(min_length=1)]
    description: str | None = None
    questions: list[QuizQuestion] = []
    max_attempts: Annotated[int, Field(ge=1)] = 1
    # minutes; None means untimed
    timer: Annotated[int | None, Field(ge=1)] = None


class UpdateQuiz(BaseModel):
    title: str | None = Field(None, min_length=1)
    description: str | None = None
    questions: list[QuizQuestion] | None = None
    max_attempts: int | None = Field(None, ge=1)
    timer: int | None = Field(None, ge=1)
