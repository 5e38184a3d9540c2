import uuid
from typing import Any

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.db.models.database import Quiz, User
from academy.db.session import get_session
from academy.libs.formats.datetime import now as get_now
from academy.libs.formats.records import quiz_to_dict
from academy.schemas.teacher.course import PublishSchema
from academy.schemas.teacher.quiz import CreateQuiz, QuizQuestion, UpdateQuiz
from academy.services.shares.access import AccessService
from academy.services.teacher.course import next_content_position


def _store_questions(questions: list[QuizQuestion]) -> list[dict[str, Any]]:
    return [{"id": str(uuid.uuid4()), **q.model_dump()} for q in questions]


class TeacherQuizService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        access: AccessService = Depends(AccessService),
    ):
        self.db = db
        self.access = access

    async def _get_owned_quiz(self, quiz_id: uuid.UUID, user: User) -> Quiz:
        quiz = await self.db.scalar(select(Quiz).where(Quiz.id == quiz_id))
        if not quiz:
            raise HTTPException(status_code=404, detail="Quiz not found")
        await self.access.get_owned_course(quiz.course_id, user)
        return quiz

    async def create_quiz_async(self, course_id: uuid.UUID, schema: CreateQuiz, user: User) -> dict[str, Any]:
        try:
            await self.access.get_owned_course(course_id, user)
            quiz = Quiz(
                course_id=course_id,
                title=schema.title,
                description=schema.description,
                questions=_store_questions(schema.questions),
                max_attempts=schema.max_attempts,
                timer=schema.timer,
                position=await next_content_position(self.db, course_id),
            )
            self.db.add(quiz)
            await self.db.commit()
            await self.db.refresh(quiz)
            logger.info(f"❓ Quiz '{quiz.title}' created with {len(quiz.questions)} questions")
            return quiz_to_dict(quiz)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Create quiz failed")
            raise HTTPException(status_code=500, detail=f"Create quiz failed: {e}")

    async def get_quiz_async(self, quiz_id: uuid.UUID, user: User) -> dict[str, Any]:
        return quiz_to_dict(await self._get_owned_quiz(quiz_id, user))

    async def update_quiz_async(self, quiz_id: uuid.UUID, schema: UpdateQuiz, user: User) -> dict[str, Any]:
        try:
            quiz = await self._get_owned_quiz(quiz_id, user)
            data = schema.model_dump(exclude_unset=True, exclude={"questions"})
            for key, value in data.items():
                setattr(quiz, key, value)
            if schema.questions is not None:
                quiz.questions = _store_questions(schema.questions)
            quiz.updated_at = get_now()
            await self.db.commit()
            await self.db.refresh(quiz)
            return quiz_to_dict(quiz)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Update quiz failed")
            raise HTTPException(status_code=500, detail=f"Update quiz failed: {e}")

    async def delete_quiz_async(self, quiz_id: uuid.UUID, user: User) -> None:
        try:
            quiz = await self._get_owned_quiz(quiz_id, user)
            await self.db.delete(quiz)
            await self.db.commit()
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Delete quiz failed")
            raise HTTPException(status_code=500, detail=f"Delete quiz failed: {e}")

    async def publish_quiz_async(self, quiz_id: uuid.UUID, schema: PublishSchema, user: User) -> dict[str, Any]:
        try:
            quiz = await self._get_owned_quiz(quiz_id, user)
            if schema.is_published and not quiz.questions:
                raise HTTPException(status_code=400, detail="Quiz has no questions")
            quiz.is_published = schema.is_published
            quiz.updated_at = get_now()
            await self.db.commit()
            await self.db.refresh(quiz)
            return quiz_to_dict(quiz)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Publish quiz failed")
            raise HTTPException(status_code=500, detail=f"Publish quiz failed: {e}")
