import uuid
from typing import Any

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.enum import ContentType
from academy.db.models.database import Chapter, Course, LiveStream, Quiz, User
from academy.db.session import get_session
from academy.libs.curriculum import is_valid_selection
from academy.libs.formats.datetime import now as get_now
from academy.libs.formats.records import course_to_dict
from academy.schemas.teacher.course import CreateCourse, PublishSchema, ReorderSchema, UpdateCourse
from academy.services.shares.access import AccessService

CONTENT_MODELS = {
    ContentType.CHAPTER: Chapter,
    ContentType.QUIZ: Quiz,
    ContentType.LIVESTREAM: LiveStream,
}


async def next_content_position(db: AsyncSession, course_id: uuid.UUID) -> int:
    """One past the highest position used by any content item of the course."""
    highest = 0
    for model in CONTENT_MODELS.values():
        value = await db.scalar(select(func.max(model.position)).where(model.course_id == course_id))
        highest = max(highest, value or 0)
    return highest + 1


class TeacherCourseService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        access: AccessService = Depends(AccessService),
    ):
        self.db = db
        self.access = access

    @staticmethod
    def _check_targets(curriculum, level, language, grade) -> None:
        if not is_valid_selection(curriculum, level, language, grade):
            raise HTTPException(status_code=400, detail="Invalid curriculum selection")

    async def create_course_async(self, schema: CreateCourse, user: User) -> dict[str, Any]:
        try:
            self._check_targets(
                schema.target_curriculum, schema.target_level, schema.target_language, schema.target_grade
            )
            course = Course(user_id=user.id, **schema.model_dump())
            self.db.add(course)
            await self.db.commit()
            await self.db.refresh(course)
            logger.info(f"📚 Course '{course.title}' created by {user.email}")
            return course_to_dict(course)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Create course failed")
            raise HTTPException(status_code=500, detail=f"Create course failed: {e}")

    async def update_course_async(
        self, course_id: uuid.UUID, schema: UpdateCourse, user: User
    ) -> dict[str, Any]:
        try:
            course = await self.access.get_owned_course(course_id, user)
            data = schema.model_dump(exclude_unset=True)
            for key, value in data.items():
                setattr(course, key, value)
            self._check_targets(
                course.target_curriculum, course.target_level, course.target_language, course.target_grade
            )
            course.updated_at = get_now()

            # new targets may now be covered by active subscriptions
            if course.is_published and any(k.startswith("target_") for k in data):
                await self.access.grant_course_to_subscriptions(course)

            await self.db.commit()
            await self.db.refresh(course)
            return course_to_dict(course)
        except HTTPException:
            await self.db.rollback()
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Update course failed")
            raise HTTPException(status_code=500, detail=f"Update course failed: {e}")

    async def delete_course_async(self, course_id: uuid.UUID, user: User) -> None:
        try:
            course = await self.access.get_owned_course(course_id, user)
            await self.db.delete(course)
            await self.db.commit()
            logger.info(f"🗑 Course {course_id} deleted by {user.email}")
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Delete course failed")
            raise HTTPException(status_code=500, detail=f"Delete course failed: {e}")

    async def publish_course_async(
        self, course_id: uuid.UUID, schema: PublishSchema, user: User
    ) -> dict[str, Any]:
        try:
            course = await self.access.get_owned_course(course_id, user)
            if schema.is_published:
                published_chapter = await self.db.scalar(
                    select(Chapter.id)
                    .where(Chapter.course_id == course.id, Chapter.is_published.is_(True))
                    .limit(1)
                )
                if not course.title or not course.description or not course.image_url or not published_chapter:
                    raise HTTPException(status_code=400, detail="Missing required fields")

            course.is_published = schema.is_published
            course.updated_at = get_now()
            granted = 0
            if course.is_published:
                granted = await self.access.grant_course_to_subscriptions(course)
            await self.db.commit()
            await self.db.refresh(course)
            logger.info(f"📣 Course {course.id} published={course.is_published}, granted to {granted} subscriptions")
            return course_to_dict(course)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Publish course failed")
            raise HTTPException(status_code=500, detail=f"Publish course failed: {e}")

    async def reorder_content_async(
        self, course_id: uuid.UUID, schema: ReorderSchema, user: User
    ) -> dict[str, str]:
        """Apply a full content ordering in one transaction."""
        try:
            await self.access.get_owned_course(course_id, user)

            positions = [item.position for item in schema.list]
            if len(set(positions)) != len(positions):
                raise HTTPException(status_code=400, detail="Duplicate positions")

            for item in schema.list:
                model = CONTENT_MODELS[item.type]
                row = await self.db.scalar(
                    select(model).where(model.id == item.id, model.course_id == course_id)
                )
                if not row:
                    raise HTTPException(
                        status_code=400,
                        detail=f"{item.type.value} {item.id} does not belong to this course",
                    )
                row.position = item.position

            await self.db.commit()
            logger.info(f"↕ Reordered {len(schema.list)} items in course {course_id}")
            return {"message": "Success"}
        except HTTPException:
            await self.db.rollback()
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Reorder failed")
            raise HTTPException(status_code=500, detail=f"Reorder failed: {e}")
