import uuid
from typing import Any

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from academy.db.models.database import Quiz, QuizResult
from academy.db.session import get_session
from academy.services.user.quizzes import result_to_dict


class QuizResultService:
    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    async def list_results_async(self, course_id: uuid.UUID | None = None) -> list[dict[str, Any]]:
        stmt = (
            select(QuizResult)
            .join(Quiz, Quiz.id == QuizResult.quiz_id)
            .options(
                selectinload(QuizResult.user),
                selectinload(QuizResult.quiz).selectinload(Quiz.course),
            )
        )
        if course_id:
            stmt = stmt.where(Quiz.course_id == course_id)
        results = (await self.db.scalars(stmt.order_by(QuizResult.created_at.desc()))).all()

        return [
            {
                **result_to_dict(r),
                "user": {"id": r.user.id, "full_name": r.user.full_name, "email": r.user.email},
                "quiz": {
                    "id": r.quiz.id,
                    "title": r.quiz.title,
                    "course_id": r.quiz.course_id,
                    "course_title": r.quiz.course.title,
                },
            }
            for r in results
        ]
