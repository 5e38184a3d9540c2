import uuid
from typing import Any

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.db.models.database import Quiz, QuizResult, User
from academy.db.session import get_session
from academy.libs.formats.records import quiz_to_dict
from academy.services.shares.access import AccessService
from academy.services.user.learning import next_content


def _normalize(answer: Any) -> str:
    return str(answer).strip().lower()


def score_quiz(questions: list[dict[str, Any]], answers: dict[str, Any]) -> tuple[int, int]:
    """(score, total_points) for answers keyed by question id."""
    score = 0
    total = 0
    for question in questions:
        points = int(question.get("points", 1))
        total += points
        given = answers.get(str(question.get("id")))
        if given is not None and _normalize(given) == _normalize(question.get("correct_answer", "")):
            score += points
    return score, total


def result_to_dict(result: QuizResult) -> dict[str, Any]:
    return {
        "id": result.id,
        "quiz_id": result.quiz_id,
        "user_id": result.user_id,
        "attempt_number": result.attempt_number,
        "score": result.score,
        "total_points": result.total_points,
        "percentage": result.percentage,
        "answers": result.answers,
        "created_at": result.created_at,
    }


class QuizService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        access: AccessService = Depends(AccessService),
    ):
        self.db = db
        self.access = access

    async def _get_quiz(self, course_id: uuid.UUID, quiz_id: uuid.UUID, user: User) -> Quiz:
        course = await self.access.get_course_or_404(course_id)
        quiz = await self.db.scalar(select(Quiz).where(Quiz.id == quiz_id, Quiz.course_id == course_id))
        manager = self.access.can_manage(user, course)
        if not quiz or not (manager or (quiz.is_published and course.is_published)):
            raise HTTPException(status_code=404, detail="Quiz not found")
        await self.access.require_course_access(user, course)
        return quiz

    async def _attempts_taken(self, quiz: Quiz, user: User) -> int:
        taken = await self.db.scalar(
            select(func.count(QuizResult.id)).where(QuizResult.quiz_id == quiz.id, QuizResult.user_id == user.id)
        )
        return taken or 0

    async def _require_attempt_left(self, quiz: Quiz, user: User) -> int:
        taken = await self._attempts_taken(quiz, user)
        if taken >= quiz.max_attempts:
            raise HTTPException(status_code=400, detail="Maximum attempts reached for this quiz")
        return taken

    async def get_quiz_info_async(self, course_id: uuid.UUID, quiz_id: uuid.UUID, user: User) -> dict[str, Any]:
        """Attempt bookkeeping shown before a quiz starts; never blocked by the attempt limit."""
        quiz = await self._get_quiz(course_id, quiz_id, user)
        taken = await self._attempts_taken(quiz, user)
        return {
            "id": quiz.id,
            "title": quiz.title,
            "max_attempts": quiz.max_attempts,
            "timer": quiz.timer,
            "current_attempt": taken + 1,
            "previous_attempts": taken,
        }

    async def get_quiz_async(self, course_id: uuid.UUID, quiz_id: uuid.UUID, user: User) -> dict[str, Any]:
        quiz = await self._get_quiz(course_id, quiz_id, user)
        taken = await self._require_attempt_left(quiz, user)
        data = quiz_to_dict(quiz, with_answers=False)
        data["current_attempt"] = taken + 1
        data["previous_attempts"] = taken
        following = await next_content(self.db, course_id, quiz.id)
        data["next_content_id"] = following["id"] if following else None
        data["next_content_type"] = following["type"] if following else None
        return data

    async def submit_result_async(
        self, course_id: uuid.UUID, quiz_id: uuid.UUID, answers: dict[str, Any], user: User
    ) -> dict[str, Any]:
        try:
            quiz = await self._get_quiz(course_id, quiz_id, user)
            attempts = await self._require_attempt_left(quiz, user)
            score, total = score_quiz(quiz.questions or [], answers)
            result = QuizResult(
                quiz_id=quiz.id,
                user_id=user.id,
                attempt_number=attempts + 1,
                score=score,
                total_points=total,
                percentage=round(score / total * 100, 2) if total else 0.0,
                answers=answers,
            )
            self.db.add(result)
            await self.db.commit()
            await self.db.refresh(result)
            logger.info(f"🏁 {user.email} scored {score}/{total} on quiz {quiz.id}")
            return result_to_dict(result)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Quiz submission failed")
            raise HTTPException(status_code=500, detail=f"Quiz submission failed: {e}")

    async def get_latest_result_async(self, course_id: uuid.UUID, quiz_id: uuid.UUID, user: User) -> dict[str, Any]:
        await self._get_quiz(course_id, quiz_id, user)
        result = await self.db.scalar(
            select(QuizResult)
            .where(QuizResult.quiz_id == quiz_id, QuizResult.user_id == user.id)
            .order_by(QuizResult.attempt_number.desc())
            .limit(1)
        )
        if not result:
            raise HTTPException(status_code=404, detail="Quiz result not found")
        return result_to_dict(result)
