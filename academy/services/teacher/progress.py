import uuid
from typing import Any

from fastapi import Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from academy.core.enum import PurchaseStatus, Role
from academy.db.models.database import Chapter, Course, Purchase, User, UserProgress
from academy.db.session import get_session
from academy.libs.filters import FilterState, page_envelope
from academy.libs.formats.records import user_to_dict
from academy.libs.progress import completion_percentage, course_breakdown
from academy.services.shares.user_query import fetch_user_page


class StudentProgressService:
    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    async def list_students_async(self, filters: FilterState, page: int, size: int) -> dict[str, Any]:
        rows, total_items = await fetch_user_page(self.db, filters, page, size, roles=[Role.USER])
        items = [
            {**user_to_dict(user), "purchases_count": purchases, "completed_chapters": completed}
            for user, purchases, completed in rows
        ]
        return page_envelope(items, page, size, total_items)

    async def get_user_progress_async(self, user_id: uuid.UUID, viewer: User) -> dict[str, Any]:
        student = await self.db.scalar(select(User).where(User.id == user_id))
        if not student:
            raise HTTPException(status_code=404, detail="User not found")

        purchase_stmt = (
            select(Purchase)
            .join(Course, Course.id == Purchase.course_id)
            .where(Purchase.user_id == user_id, Purchase.status == PurchaseStatus.ACTIVE)
            .options(selectinload(Purchase.course))
        )
        if viewer.role == Role.TEACHER:
            purchase_stmt = purchase_stmt.where(Course.user_id == viewer.id)
        purchases = (await self.db.scalars(purchase_stmt.order_by(Purchase.created_at.desc()))).all()
        course_ids = [p.course_id for p in purchases]

        chapters = []
        progress = []
        if course_ids:
            chapters = (
                await self.db.scalars(
                    select(Chapter)
                    .where(Chapter.course_id.in_(course_ids), Chapter.is_published.is_(True))
                    .order_by(Chapter.course_id, Chapter.position)
                )
            ).all()
            progress = (
                await self.db.scalars(
                    select(UserProgress).where(
                        UserProgress.user_id == user_id,
                        UserProgress.chapter_id.in_([ch.id for ch in chapters]),
                    )
                )
            ).all()

        breakdown = course_breakdown(progress, chapters)
        return {
            "user": user_to_dict(student),
            "user_progress": [
                {
                    "id": p.id,
                    "chapter_id": p.chapter_id,
                    "is_completed": p.is_completed,
                    "updated_at": p.updated_at,
                }
                for p in progress
            ],
            "purchases": [
                {
                    "id": p.id,
                    "course_id": p.course_id,
                    "status": p.status,
                    "created_at": p.created_at,
                    "course": {"id": p.course.id, "title": p.course.title, "image_url": p.course.image_url},
                }
                for p in purchases
            ],
            "all_chapters": [
                {"id": ch.id, "course_id": ch.course_id, "title": ch.title, "position": ch.position}
                for ch in chapters
            ],
            "courses": breakdown,
            "overall_progress": completion_percentage(progress, chapters),
        }
