import uuid
from typing import Any

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from academy.core.settings import settings
from academy.db.models.database import (
    Activity,
    ActivitySubmission,
    Chapter,
    Course,
    HomeworkSubmission,
    User,
    UserProgress,
)
from academy.db.session import get_session
from academy.libs.formats.datetime import now as get_now
from academy.libs.formats.records import (
    activity_to_dict,
    attachment_to_dict,
    chapter_to_dict,
    submission_to_dict,
)
from academy.schemas.user.learning import SubmitImage
from academy.services.shares.access import AccessService
from academy.services.teacher.course import CONTENT_MODELS


async def next_content(db: AsyncSession, course_id: uuid.UUID, current_id: uuid.UUID) -> dict[str, Any] | None:
    """The published item that follows ``current_id`` in the course content order."""
    sequence: list[tuple[int, int, uuid.UUID, Any]] = []
    for order, (content_type, model) in enumerate(CONTENT_MODELS.items()):
        rows = await db.execute(
            select(model.id, model.position).where(
                model.course_id == course_id, model.is_published.is_(True)
            )
        )
        sequence.extend((position, order, row_id, content_type) for row_id, position in rows.all())
    sequence.sort(key=lambda item: (item[0], item[1]))

    ids = [item[2] for item in sequence]
    if current_id not in ids:
        return None
    index = ids.index(current_id)
    if index + 1 >= len(sequence):
        return None
    _, _, next_id, next_type = sequence[index + 1]
    return {"id": next_id, "type": next_type}


class LearningService:
    """Student side of a chapter: detail, completion, homework and activities."""

    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        access: AccessService = Depends(AccessService),
    ):
        self.db = db
        self.access = access

    # ==============================
    # 🔎 HELPERS
    # ==============================

    async def _get_chapter(self, course_id: uuid.UUID, chapter_id: uuid.UUID, user: User) -> tuple[Course, Chapter]:
        course = await self.access.get_course_or_404(course_id)
        chapter = await self.db.scalar(
            select(Chapter)
            .where(Chapter.id == chapter_id, Chapter.course_id == course_id)
            .options(selectinload(Chapter.attachments))
        )
        if not chapter:
            raise HTTPException(status_code=404, detail="Chapter not found")
        if not self.access.can_manage(user, course) and not (chapter.is_published and course.is_published):
            raise HTTPException(status_code=404, detail="Chapter not found")
        return course, chapter

    async def _require_chapter_access(self, course: Course, chapter: Chapter, user: User) -> None:
        if chapter.is_free:
            return
        await self.access.require_course_access(user, course)

    async def _get_activity(self, chapter: Chapter, activity_id: uuid.UUID) -> Activity:
        activity = await self.db.scalar(
            select(Activity).where(Activity.id == activity_id, Activity.chapter_id == chapter.id)
        )
        if not activity:
            raise HTTPException(status_code=404, detail="Activity not found")
        return activity

    # ==============================
    # 📖 CHAPTERS
    # ==============================

    async def list_chapters_async(self, course_id: uuid.UUID, user: User) -> list[dict[str, Any]]:
        course = await self.access.get_course_or_404(course_id)
        manager = self.access.can_manage(user, course)
        if not course.is_published and not manager:
            raise HTTPException(status_code=404, detail="Course not found")

        stmt = select(Chapter).where(Chapter.course_id == course_id)
        if not manager:
            stmt = stmt.where(Chapter.is_published.is_(True))
        chapters = (await self.db.scalars(stmt.order_by(Chapter.position))).all()

        completed = set(
            (
                await self.db.scalars(
                    select(UserProgress.chapter_id).where(
                        UserProgress.user_id == user.id, UserProgress.is_completed.is_(True)
                    )
                )
            ).all()
        )
        return [{**chapter_to_dict(ch), "is_completed": ch.id in completed} for ch in chapters]

    async def get_chapter_async(self, course_id: uuid.UUID, chapter_id: uuid.UUID, user: User) -> dict[str, Any]:
        course, chapter = await self._get_chapter(course_id, chapter_id, user)

        unlocked = chapter.is_free or (await self.access.check_course_access(user, course))["has_access"]
        progress = await self.db.scalar(
            select(UserProgress).where(UserProgress.user_id == user.id, UserProgress.chapter_id == chapter.id)
        )
        following = await next_content(self.db, course_id, chapter.id)

        data = chapter_to_dict(chapter)
        if not unlocked:
            data["video_url"] = None
        data["is_locked"] = not unlocked
        data["attachments"] = [attachment_to_dict(a) for a in chapter.attachments] if unlocked else []
        data["is_completed"] = bool(progress and progress.is_completed)
        data["next_content_id"] = following["id"] if following else None
        data["next_content_type"] = following["type"] if following else None
        return data

    # ==============================
    # ✅ PROGRESS
    # ==============================

    async def get_progress_async(self, course_id: uuid.UUID, chapter_id: uuid.UUID, user: User) -> dict[str, bool]:
        await self._get_chapter(course_id, chapter_id, user)
        progress = await self.db.scalar(
            select(UserProgress).where(UserProgress.user_id == user.id, UserProgress.chapter_id == chapter_id)
        )
        return {"is_completed": bool(progress and progress.is_completed)}

    async def complete_chapter_async(self, course_id: uuid.UUID, chapter_id: uuid.UUID, user: User) -> dict[str, Any]:
        """Mark complete; points are awarded only the first time."""
        try:
            await self._get_chapter(course_id, chapter_id, user)
            progress = await self.db.scalar(
                select(UserProgress).where(UserProgress.user_id == user.id, UserProgress.chapter_id == chapter_id)
            )
            first_completion = not progress or not progress.is_completed
            if progress:
                progress.is_completed = True
                progress.updated_at = get_now()
            else:
                progress = UserProgress(user_id=user.id, chapter_id=chapter_id, is_completed=True)
                self.db.add(progress)

            if first_completion:
                user.points = (user.points or 0) + settings.CHAPTER_COMPLETION_POINTS

            await self.db.commit()
            await self.db.refresh(progress)
            return {
                "id": progress.id,
                "user_id": progress.user_id,
                "chapter_id": progress.chapter_id,
                "is_completed": progress.is_completed,
                "points": user.points,
            }
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Chapter progress update failed")
            raise HTTPException(status_code=500, detail=f"Chapter progress update failed: {e}")

    async def uncomplete_chapter_async(self, course_id: uuid.UUID, chapter_id: uuid.UUID, user: User) -> None:
        try:
            progress = await self.db.scalar(
                select(UserProgress).where(UserProgress.user_id == user.id, UserProgress.chapter_id == chapter_id)
            )
            if not progress:
                raise HTTPException(status_code=404, detail="Not Found")

            award = settings.CHAPTER_COMPLETION_POINTS
            if progress.is_completed and (user.points or 0) >= award:
                user.points = user.points - award

            await self.db.delete(progress)
            await self.db.commit()
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Chapter progress delete failed")
            raise HTTPException(status_code=500, detail=f"Chapter progress delete failed: {e}")

    # ==============================
    # 📝 HOMEWORK
    # ==============================

    async def get_homework_async(self, course_id: uuid.UUID, chapter_id: uuid.UUID, user: User) -> dict[str, Any] | None:
        await self._get_chapter(course_id, chapter_id, user)
        submission = await self.db.scalar(
            select(HomeworkSubmission).where(
                HomeworkSubmission.student_id == user.id, HomeworkSubmission.chapter_id == chapter_id
            )
        )
        return submission_to_dict(submission) if submission else None

    async def submit_homework_async(
        self, course_id: uuid.UUID, chapter_id: uuid.UUID, schema: SubmitImage, user: User
    ) -> dict[str, Any]:
        try:
            if not schema.image_url or not schema.image_url.strip():
                raise HTTPException(status_code=400, detail="Image URL is required")
            course, chapter = await self._get_chapter(course_id, chapter_id, user)
            await self._require_chapter_access(course, chapter, user)

            submission = await self.db.scalar(
                select(HomeworkSubmission).where(
                    HomeworkSubmission.student_id == user.id, HomeworkSubmission.chapter_id == chapter_id
                )
            )
            if submission:
                submission.image_url = schema.image_url
                submission.updated_at = get_now()
            else:
                submission = HomeworkSubmission(
                    student_id=user.id, chapter_id=chapter_id, image_url=schema.image_url
                )
                self.db.add(submission)
            await self.db.commit()
            await self.db.refresh(submission)
            logger.info(f"📝 Homework submitted by {user.email} for chapter {chapter_id}")
            return submission_to_dict(submission)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Homework submission failed")
            raise HTTPException(status_code=500, detail=f"Homework submission failed: {e}")

    # ==============================
    # 🎨 ACTIVITIES
    # ==============================

    async def list_activities_async(self, course_id: uuid.UUID, chapter_id: uuid.UUID, user: User) -> list[dict[str, Any]]:
        course, chapter = await self._get_chapter(course_id, chapter_id, user)
        await self._require_chapter_access(course, chapter, user)
        activities = (
            await self.db.scalars(
                select(Activity).where(Activity.chapter_id == chapter_id).order_by(Activity.created_at)
            )
        ).all()
        return [activity_to_dict(a) for a in activities]

    async def get_activity_submission_async(
        self, course_id: uuid.UUID, chapter_id: uuid.UUID, activity_id: uuid.UUID, user: User
    ) -> dict[str, Any] | None:
        _, chapter = await self._get_chapter(course_id, chapter_id, user)
        await self._get_activity(chapter, activity_id)
        submission = await self.db.scalar(
            select(ActivitySubmission).where(
                ActivitySubmission.student_id == user.id, ActivitySubmission.activity_id == activity_id
            )
        )
        return submission_to_dict(submission) if submission else None

    async def submit_activity_async(
        self,
        course_id: uuid.UUID,
        chapter_id: uuid.UUID,
        activity_id: uuid.UUID,
        schema: SubmitImage,
        user: User,
    ) -> dict[str, Any]:
        try:
            if not schema.image_url or not schema.image_url.strip():
                raise HTTPException(status_code=400, detail="Image URL is required")
            course, chapter = await self._get_chapter(course_id, chapter_id, user)
            await self._get_activity(chapter, activity_id)
            await self._require_chapter_access(course, chapter, user)

            submission = await self.db.scalar(
                select(ActivitySubmission).where(
                    ActivitySubmission.student_id == user.id, ActivitySubmission.activity_id == activity_id
                )
            )
            if submission:
                submission.image_url = schema.image_url
                submission.updated_at = get_now()
            else:
                submission = ActivitySubmission(
                    student_id=user.id, activity_id=activity_id, image_url=schema.image_url
                )
                self.db.add(submission)
            await self.db.commit()
            await self.db.refresh(submission)
            return submission_to_dict(submission)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Activity submission failed")
            raise HTTPException(status_code=500, detail=f"Activity submission failed: {e}")
