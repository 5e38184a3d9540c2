from datetime import timedelta
from typing import Any

from fastapi import Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from academy.core.enum import ContentType, PurchaseStatus
from academy.core.settings import settings
from academy.db.models.database import (
    Certificate,
    Chapter,
    Course,
    LiveStream,
    Purchase,
    Quiz,
    QuizResult,
    StudentMessage,
    User,
    UserProgress,
)
from academy.db.session import get_session
from academy.libs.formats.datetime import hours_ago, now as get_now
from academy.libs.formats.records import course_to_dict, message_to_dict, user_to_dict
from academy.services.admin.message import deactivate_stale_messages

NEW_CONTENT_PER_KIND = 10
NEW_CONTENT_LIMIT = 15

_CONTENT_KINDS = (
    (Chapter, ContentType.CHAPTER, "chapters"),
    (Quiz, ContentType.QUIZ, "quizzes"),
    (LiveStream, ContentType.LIVESTREAM, "livestreams"),
)


def message_matches(message: StudentMessage, user: User) -> bool:
    """Every target set on the message must equal the student's value; unset targets match anyone.

    Students enrolled with a curriculum type (morning/evening) but no curriculum
    belong to the Egyptian curriculum.
    """
    curriculum = user.curriculum
    if not curriculum and user.curriculum_type:
        curriculum = "egyptian"

    wanted = (
        (message.target_curriculum, curriculum),
        (message.target_level, user.level),
        (message.target_language, user.language or None),
        (message.target_grade, user.grade or None),
    )
    return all(not target or target == value for target, value in wanted)


def _content_item(row: Chapter | Quiz | LiveStream, kind: ContentType, segment: str) -> dict[str, Any]:
    item = {
        "id": row.id,
        "type": kind,
        "title": row.title,
        "description": row.description,
        "course_id": row.course_id,
        "course_title": row.course.title,
        "course_image": row.course.image_url,
        "created_at": row.updated_at,
        "link": f"/courses/{row.course_id}/{segment}/{row.id}",
    }
    if isinstance(row, LiveStream):
        ends_at = row.scheduled_at + timedelta(minutes=row.duration_minutes or 0)
        item["scheduled_at"] = row.scheduled_at
        item["is_expired"] = bool(row.duration_minutes) and get_now() > ends_at
    return item


def _certificate_item(certificate: Certificate) -> dict[str, Any]:
    assigner = certificate.assigner.full_name if certificate.assigner else None
    return {
        "id": certificate.id,
        "type": "certificate",
        "title": certificate.title or "New Certificate",
        "description": certificate.description or f"Certificate assigned by {assigner or 'staff'}",
        "assigner_name": assigner,
        "image_url": certificate.image_url,
        "created_at": certificate.created_at,
        "link": "/dashboard/certificates",
    }


class DashboardService:
    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    def _purchased_course_ids(self, user: User):
        return select(Purchase.course_id).where(
            Purchase.user_id == user.id, Purchase.status == PurchaseStatus.ACTIVE
        )

    async def get_messages_async(self, user: User) -> list[dict[str, Any]]:
        await deactivate_stale_messages(self.db)
        await self.db.commit()
        messages = (
            await self.db.scalars(
                select(StudentMessage)
                .where(StudentMessage.is_active.is_(True))
                .order_by(StudentMessage.created_at.desc())
            )
        ).all()
        matching = [m for m in messages if message_matches(m, user)]
        return [message_to_dict(m) for m in matching[: settings.DASHBOARD_MESSAGE_LIMIT]]

    # ==============================
    # 🆕 NEW CONTENT
    # ==============================

    async def get_new_content_async(self, user: User) -> dict[str, list[dict[str, Any]]]:
        """Content published or edited recently in the student's courses, plus fresh certificates."""
        since = hours_ago(settings.NEW_CONTENT_HOURS)
        course_ids = self._purchased_course_ids(user)

        items: list[dict[str, Any]] = []
        for model, kind, segment in _CONTENT_KINDS:
            rows = (
                await self.db.scalars(
                    select(model)
                    .where(
                        model.course_id.in_(course_ids),
                        model.is_published.is_(True),
                        model.updated_at >= since,
                    )
                    .options(selectinload(model.course))
                    .order_by(model.updated_at.desc())
                    .limit(NEW_CONTENT_PER_KIND)
                )
            ).all()
            items.extend(_content_item(row, kind, segment) for row in rows)

        certificates = (
            await self.db.scalars(
                select(Certificate)
                .where(Certificate.student_id == user.id, Certificate.created_at >= since)
                .options(selectinload(Certificate.assigner))
                .order_by(Certificate.created_at.desc())
                .limit(NEW_CONTENT_PER_KIND)
            )
        ).all()
        items.extend(_certificate_item(c) for c in certificates)

        items.sort(key=lambda item: item["created_at"], reverse=True)
        return {"new_content": items[:NEW_CONTENT_LIMIT]}

    # ==============================
    # 📊 STUDENT STATS
    # ==============================

    async def get_student_stats_async(self, user: User) -> dict[str, Any]:
        best_scores = (
            await self.db.execute(
                select(QuizResult.quiz_id, func.max(QuizResult.percentage))
                .where(QuizResult.user_id == user.id)
                .group_by(QuizResult.quiz_id)
            )
        ).all()
        average_score = round(sum(p for _, p in best_scores) / len(best_scores)) if best_scores else 0

        last_progress = await self.db.scalar(
            select(UserProgress)
            .where(UserProgress.user_id == user.id, UserProgress.is_completed.is_(False))
            .options(selectinload(UserProgress.chapter).selectinload(Chapter.course))
            .order_by(UserProgress.updated_at.desc())
            .limit(1)
        )
        last_watched = None
        if last_progress:
            chapter = last_progress.chapter
            last_watched = {
                "id": chapter.id,
                "title": chapter.title,
                "course_id": chapter.course_id,
                "position": chapter.position,
                "course_title": chapter.course.title,
                "course_image": chapter.course.image_url,
            }

        courses = (
            await self.db.scalars(
                select(Course)
                .where(Course.id.in_(self._purchased_course_ids(user)))
                .options(selectinload(Course.chapters), selectinload(Course.quizzes))
                .order_by(Course.created_at.desc())
            )
        ).all()
        chapter_ids = {ch.id for c in courses for ch in c.chapters if ch.is_published}
        quiz_ids = {q.id for c in courses for q in c.quizzes if q.is_published}

        done_chapters: set = set()
        if chapter_ids:
            done_chapters = set(
                (
                    await self.db.scalars(
                        select(UserProgress.chapter_id).where(
                            UserProgress.user_id == user.id,
                            UserProgress.is_completed.is_(True),
                            UserProgress.chapter_id.in_(chapter_ids),
                        )
                    )
                ).all()
            )
        done_quizzes: set = set()
        if quiz_ids:
            done_quizzes = set(
                (
                    await self.db.scalars(
                        select(QuizResult.quiz_id).where(QuizResult.user_id == user.id, QuizResult.quiz_id.in_(quiz_ids))
                    )
                ).all()
            )

        courses_with_progress = []
        for course in courses:
            published = [ch.id for ch in course.chapters if ch.is_published] + [
                q.id for q in course.quizzes if q.is_published
            ]
            done = sum(1 for item_id in published if item_id in done_chapters or item_id in done_quizzes)
            progress = round(done / len(published) * 100, 2) if published else 0
            courses_with_progress.append({**course_to_dict(course), "progress": progress})

        return {
            "user": user_to_dict(user),
            "last_watched_chapter": last_watched,
            "student_stats": {
                "total_courses": len(courses),
                "total_chapters": len(chapter_ids),
                "completed_chapters": len(done_chapters),
                "total_quizzes": len(quiz_ids),
                "completed_quizzes": len(done_quizzes),
                "average_score": average_score,
            },
            "courses_with_progress": courses_with_progress,
        }

    async def get_points_async(self, user: User) -> dict[str, Any]:
        return {"id": user.id, "role": user.role, "full_name": user.full_name, "points": user.points or 0}
