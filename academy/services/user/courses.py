import uuid
from decimal import Decimal
from typing import Any

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.enum import ContentType, PurchaseStatus
from academy.db.models.database import Chapter, Course, LiveStream, Purchase, Quiz, User, UserProgress
from academy.db.session import get_session
from academy.libs.filters import FilterState, classification_clauses
from academy.libs.formats.records import content_item, course_to_dict
from academy.libs.progress import completion_percentage
from academy.services.shares.access import AccessService

COURSE_TARGET_COLUMNS = {
    "curriculum": Course.target_curriculum,
    "level": Course.target_level,
    "language": Course.target_language,
    "grade": Course.target_grade,
}

_TYPE_ORDER = {ContentType.CHAPTER: 0, ContentType.QUIZ: 1, ContentType.LIVESTREAM: 2}


class CourseService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        access: AccessService = Depends(AccessService),
    ):
        self.db = db
        self.access = access

    async def list_courses_async(self, filters: FilterState) -> list[dict[str, Any]]:
        chapter_count = (
            select(func.count(Chapter.id))
            .where(Chapter.course_id == Course.id, Chapter.is_published.is_(True))
            .correlate(Course)
            .scalar_subquery()
        )
        stmt = select(Course, chapter_count.label("chapters_count")).where(Course.is_published.is_(True))

        term = filters.search.strip()
        if term:
            stmt = stmt.where(Course.title.ilike(f"%{term}%"))
        stmt = stmt.where(*classification_clauses(filters, COURSE_TARGET_COLUMNS))

        rows = (await self.db.execute(stmt.order_by(Course.created_at.desc()))).all()
        return [{**course_to_dict(course), "chapters_count": count or 0} for course, count in rows]

    async def get_course_async(self, course_id: uuid.UUID, user: User | None) -> dict[str, Any]:
        course = await self.access.get_course_or_404(course_id)
        if not course.is_published and not (user and self.access.can_manage(user, course)):
            raise HTTPException(status_code=404, detail="Course not found")
        return course_to_dict(course)

    async def get_content_async(self, course_id: uuid.UUID, user: User | None) -> list[dict[str, Any]]:
        """Chapters, quizzes and live streams of a course as one list ordered by position."""
        course = await self.access.get_course_or_404(course_id)
        manager = user is not None and self.access.can_manage(user, course)
        if not course.is_published and not manager:
            raise HTTPException(status_code=404, detail="Course not found")

        rows: list[Chapter | Quiz | LiveStream] = []
        for model in (Chapter, Quiz, LiveStream):
            stmt = select(model).where(model.course_id == course_id)
            if not manager:
                stmt = stmt.where(model.is_published.is_(True))
            rows.extend((await self.db.scalars(stmt)).all())

        completed: set[uuid.UUID] = set()
        if user is not None:
            completed = set(
                (
                    await self.db.scalars(
                        select(UserProgress.chapter_id).where(
                            UserProgress.user_id == user.id,
                            UserProgress.is_completed.is_(True),
                        )
                    )
                ).all()
            )

        items = [content_item(row) for row in rows]
        for item in items:
            if item["type"] == ContentType.CHAPTER:
                item["is_completed"] = item["id"] in completed
        items.sort(key=lambda i: (i["position"], _TYPE_ORDER[i["type"]]))
        return items

    async def get_access_async(self, course_id: uuid.UUID, user: User) -> dict[str, Any]:
        course = await self.access.get_course_or_404(course_id, published_only=True)
        return await self.access.check_course_access(user, course)

    async def get_progress_async(self, course_id: uuid.UUID, user: User) -> dict[str, float]:
        await self.access.get_course_or_404(course_id)
        chapters = (
            await self.db.scalars(
                select(Chapter).where(Chapter.course_id == course_id, Chapter.is_published.is_(True))
            )
        ).all()
        records = (
            await self.db.scalars(
                select(UserProgress).where(
                    UserProgress.user_id == user.id,
                    UserProgress.chapter_id.in_([c.id for c in chapters]),
                )
            )
        ).all()
        return {"progress": completion_percentage(records, chapters)}

    async def purchase_async(self, course_id: uuid.UUID, user: User) -> dict[str, Any]:
        """Buy a course with the student's balance."""
        try:
            course = await self.access.get_course_or_404(course_id, published_only=True)
            if course.is_free:
                raise HTTPException(status_code=400, detail="Course is free")
            if await self.access.has_active_purchase(user.id, course.id):
                raise HTTPException(status_code=400, detail="Course already purchased")

            price = Decimal(course.price or 0)
            balance = Decimal(user.balance or 0)
            if balance < price:
                raise HTTPException(status_code=400, detail="Insufficient balance")

            user.balance = balance - price
            purchase = await self.db.scalar(
                select(Purchase).where(Purchase.user_id == user.id, Purchase.course_id == course.id)
            )
            if purchase:
                purchase.status = PurchaseStatus.ACTIVE
                purchase.price = price
            else:
                purchase = Purchase(
                    user_id=user.id, course_id=course.id, status=PurchaseStatus.ACTIVE, price=price
                )
                self.db.add(purchase)
            await self.db.commit()
            await self.db.refresh(purchase)
            logger.success(f"💳 {user.email} purchased course {course.id} for {price}")
            return {
                "id": purchase.id,
                "course_id": purchase.course_id,
                "status": purchase.status,
                "price": purchase.price,
                "balance": user.balance,
            }
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Purchase failed")
            raise HTTPException(status_code=500, detail=f"Purchase failed: {e}")
