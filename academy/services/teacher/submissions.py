import uuid
from typing import Any

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from academy.core.enum import Role
from academy.db.models.database import Activity, ActivitySubmission, Chapter, Course, HomeworkSubmission, User
from academy.db.session import get_session
from academy.libs.formats.datetime import now as get_now
from academy.libs.formats.records import activity_to_dict, submission_to_dict
from academy.schemas.teacher.chapter import CreateActivity, GradeSubmission
from academy.services.shares.access import AccessService


def _with_student(submission: HomeworkSubmission | ActivitySubmission) -> dict[str, Any]:
    data = submission_to_dict(submission)
    data["student"] = {
        "id": submission.student.id,
        "full_name": submission.student.full_name,
        "email": submission.student.email,
        "grade": submission.student.grade,
    }
    return data


class TeacherSubmissionService:
    """Activities and the grading side of homework and activity submissions."""

    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        access: AccessService = Depends(AccessService),
    ):
        self.db = db
        self.access = access

    async def _get_managed_chapter(self, chapter_id: uuid.UUID, user: User) -> Chapter:
        chapter = await self.db.scalar(
            select(Chapter).where(Chapter.id == chapter_id).options(selectinload(Chapter.course))
        )
        if not chapter:
            raise HTTPException(status_code=404, detail="Chapter not found")
        if not self.access.can_manage(user, chapter.course):
            raise HTTPException(status_code=403, detail="You do not own this course")
        return chapter

    async def _get_managed_activity(self, activity_id: uuid.UUID, user: User) -> Activity:
        activity = await self.db.scalar(
            select(Activity)
            .where(Activity.id == activity_id)
            .options(selectinload(Activity.chapter).selectinload(Chapter.course))
        )
        if not activity:
            raise HTTPException(status_code=404, detail="Activity not found")
        if not self.access.can_manage(user, activity.chapter.course):
            raise HTTPException(status_code=403, detail="You do not own this course")
        return activity

    # ==============================
    # 🎨 ACTIVITIES
    # ==============================

    async def create_activity_async(self, chapter_id: uuid.UUID, schema: CreateActivity, user: User) -> dict[str, Any]:
        try:
            await self._get_managed_chapter(chapter_id, user)
            activity = Activity(chapter_id=chapter_id, title=schema.title, description=schema.description)
            self.db.add(activity)
            await self.db.commit()
            await self.db.refresh(activity)
            return activity_to_dict(activity)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Create activity failed")
            raise HTTPException(status_code=500, detail=f"Create activity failed: {e}")

    async def list_chapter_activities_async(self, chapter_id: uuid.UUID, user: User) -> list[dict[str, Any]]:
        await self._get_managed_chapter(chapter_id, user)
        activities = (
            await self.db.scalars(
                select(Activity).where(Activity.chapter_id == chapter_id).order_by(Activity.created_at)
            )
        ).all()
        return [activity_to_dict(a) for a in activities]

    async def delete_activity_async(self, activity_id: uuid.UUID, user: User) -> None:
        try:
            activity = await self._get_managed_activity(activity_id, user)
            await self.db.delete(activity)
            await self.db.commit()
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Delete activity failed")
            raise HTTPException(status_code=500, detail=f"Delete activity failed: {e}")

    # ==============================
    # 📥 SUBMISSIONS
    # ==============================

    async def list_homework_async(self, chapter_id: uuid.UUID, user: User) -> list[dict[str, Any]]:
        await self._get_managed_chapter(chapter_id, user)
        submissions = (
            await self.db.scalars(
                select(HomeworkSubmission)
                .where(HomeworkSubmission.chapter_id == chapter_id)
                .options(selectinload(HomeworkSubmission.student))
                .order_by(HomeworkSubmission.updated_at.desc())
            )
        ).all()
        return [_with_student(s) for s in submissions]

    async def list_activity_submissions_async(self, activity_id: uuid.UUID, user: User) -> list[dict[str, Any]]:
        await self._get_managed_activity(activity_id, user)
        submissions = (
            await self.db.scalars(
                select(ActivitySubmission)
                .where(ActivitySubmission.activity_id == activity_id)
                .options(selectinload(ActivitySubmission.student))
                .order_by(ActivitySubmission.updated_at.desc())
            )
        ).all()
        return [_with_student(s) for s in submissions]

    # ==============================
    # 👤 PER STUDENT
    # ==============================

    async def list_student_homework_async(self, student_id: uuid.UUID, user: User) -> list[dict[str, Any]]:
        """Every homework a student handed in; teachers only see their own courses."""
        stmt = (
            select(HomeworkSubmission)
            .join(Chapter, Chapter.id == HomeworkSubmission.chapter_id)
            .join(Course, Course.id == Chapter.course_id)
            .where(HomeworkSubmission.student_id == student_id)
            .options(
                selectinload(HomeworkSubmission.student),
                selectinload(HomeworkSubmission.chapter).selectinload(Chapter.course),
            )
            .order_by(Course.title, Chapter.position, HomeworkSubmission.created_at.desc())
        )
        if user.role == Role.TEACHER:
            stmt = stmt.where(Course.user_id == user.id)
        submissions = (await self.db.scalars(stmt)).all()
        return [
            {
                **_with_student(s),
                "chapter": {
                    "id": s.chapter.id,
                    "title": s.chapter.title,
                    "position": s.chapter.position,
                    "course": {"id": s.chapter.course.id, "title": s.chapter.course.title},
                },
            }
            for s in submissions
        ]

    async def list_student_activity_submissions_async(self, student_id: uuid.UUID, user: User) -> list[dict[str, Any]]:
        stmt = (
            select(ActivitySubmission)
            .join(Activity, Activity.id == ActivitySubmission.activity_id)
            .join(Chapter, Chapter.id == Activity.chapter_id)
            .join(Course, Course.id == Chapter.course_id)
            .where(ActivitySubmission.student_id == student_id)
            .options(
                selectinload(ActivitySubmission.student),
                selectinload(ActivitySubmission.activity)
                .selectinload(Activity.chapter)
                .selectinload(Chapter.course),
            )
            .order_by(Course.title, Chapter.position, ActivitySubmission.created_at.desc())
        )
        if user.role == Role.TEACHER:
            stmt = stmt.where(Course.user_id == user.id)
        submissions = (await self.db.scalars(stmt)).all()
        return [
            {
                **_with_student(s),
                "activity": {
                    "id": s.activity.id,
                    "title": s.activity.title,
                    "chapter": {
                        "id": s.activity.chapter.id,
                        "title": s.activity.chapter.title,
                        "position": s.activity.chapter.position,
                        "course": {"id": s.activity.chapter.course.id, "title": s.activity.chapter.course.title},
                    },
                },
            }
            for s in submissions
        ]

    async def grade_homework_async(self, submission_id: uuid.UUID, schema: GradeSubmission, user: User) -> dict[str, Any]:
        try:
            submission = await self.db.scalar(
                select(HomeworkSubmission)
                .where(HomeworkSubmission.id == submission_id)
                .options(
                    selectinload(HomeworkSubmission.student),
                    selectinload(HomeworkSubmission.chapter).selectinload(Chapter.course),
                )
            )
            if not submission:
                raise HTTPException(status_code=404, detail="Submission not found")
            if not self.access.can_manage(user, submission.chapter.course):
                raise HTTPException(status_code=403, detail="You do not own this course")
            return await self._grade(submission, schema)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Grade homework failed")
            raise HTTPException(status_code=500, detail=f"Grade homework failed: {e}")

    async def grade_activity_async(self, submission_id: uuid.UUID, schema: GradeSubmission, user: User) -> dict[str, Any]:
        try:
            submission = await self.db.scalar(
                select(ActivitySubmission)
                .where(ActivitySubmission.id == submission_id)
                .options(
                    selectinload(ActivitySubmission.student),
                    selectinload(ActivitySubmission.activity)
                    .selectinload(Activity.chapter)
                    .selectinload(Chapter.course),
                )
            )
            if not submission:
                raise HTTPException(status_code=404, detail="Submission not found")
            course: Course = submission.activity.chapter.course
            if not self.access.can_manage(user, course):
                raise HTTPException(status_code=403, detail="You do not own this course")
            return await self._grade(submission, schema)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Grade activity failed")
            raise HTTPException(status_code=500, detail=f"Grade activity failed: {e}")

    async def _grade(self, submission: HomeworkSubmission | ActivitySubmission, schema: GradeSubmission) -> dict[str, Any]:
        submission.corrected_image_url = schema.corrected_image_url
        if schema.feedback is not None:
            submission.feedback = schema.feedback
        submission.updated_at = get_now()
        await self.db.commit()
        logger.info(f"✔ Submission {submission.id} corrected")
        return _with_student(submission)
