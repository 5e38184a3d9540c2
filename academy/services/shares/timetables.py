import uuid
from typing import Any

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from academy.core.enum import STAFF_ROLES, PurchaseStatus, Role
from academy.db.models.database import Course, Purchase, Timetable, User
from academy.db.session import get_session
from academy.libs.formats.datetime import parse_hhmm
from academy.libs.formats.records import timetable_to_dict
from academy.schemas.shares.timetable import CreateTimetable, UpdateTimetable


def check_time_range(start_time: str | None, end_time: str | None) -> None:
    if start_time and end_time and parse_hhmm(end_time) <= parse_hhmm(start_time):
        raise HTTPException(status_code=400, detail="End time must be after start time")


def timetable_targets_student(timetable: Timetable, user: User) -> bool:
    """Classification match; empty targets are wildcards and grades are comma separated."""
    curriculum = user.curriculum or ("egyptian" if user.curriculum_type else None)
    if timetable.target_curriculum and timetable.target_curriculum != curriculum:
        return False
    if timetable.target_curriculum_type and timetable.target_curriculum_type != user.curriculum_type:
        return False
    if timetable.target_grade:
        grades = {g.strip() for g in timetable.target_grade.split(",") if g.strip()}
        if grades and user.grade not in grades:
            return False
    return True


def timetable_with_course(timetable: Timetable) -> dict[str, Any]:
    data = timetable_to_dict(timetable)
    course = timetable.course
    data["course"] = (
        {
            "id": course.id,
            "title": course.title,
            "user_id": course.user_id,
            "teacher_name": course.user.full_name if course.user else None,
        }
        if course
        else None
    )
    return data


def _with_course(stmt):
    return stmt.options(selectinload(Timetable.course).selectinload(Course.user))


def _ordered(stmt):
    return stmt.order_by(Timetable.day_of_week, Timetable.start_time, Timetable.created_at)


class TimetableService:
    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    async def _purchased_course_ids(self, user_id: uuid.UUID) -> set[uuid.UUID]:
        rows = await self.db.scalars(
            select(Purchase.course_id).where(Purchase.user_id == user_id, Purchase.status == PurchaseStatus.ACTIVE)
        )
        return set(rows.all())

    async def _visible_to(self, timetable: Timetable, user: User) -> bool:
        if user.role in STAFF_ROLES:
            return True
        if user.role == Role.TEACHER:
            return timetable.course_id is None or (timetable.course is not None and timetable.course.user_id == user.id)
        if timetable.course_id:
            return timetable.course_id in await self._purchased_course_ids(user.id)
        return timetable_targets_student(timetable, user)

    async def _get(self, timetable_id: uuid.UUID) -> Timetable:
        timetable = await self.db.scalar(
            _with_course(select(Timetable).where(Timetable.id == timetable_id)).execution_options(
                populate_existing=True
            )
        )
        if not timetable:
            raise HTTPException(status_code=404, detail="Timetable not found")
        return timetable

    # ==============================
    # 📅 READ
    # ==============================

    async def list_timetables_async(self, user: User, course_id: uuid.UUID | None = None) -> list[dict[str, Any]]:
        stmt = _ordered(_with_course(select(Timetable)))

        if user.role in STAFF_ROLES:
            if course_id:
                stmt = stmt.where(Timetable.course_id == course_id)
            timetables = (await self.db.scalars(stmt)).all()
            return [timetable_with_course(t) for t in timetables]

        if user.role == Role.TEACHER:
            own_ids = set(
                (await self.db.scalars(select(Course.id).where(Course.user_id == user.id))).all()
            )
            if course_id and course_id not in own_ids:
                raise HTTPException(status_code=403, detail="Permission denied")
            if course_id:
                stmt = stmt.where(Timetable.course_id == course_id)
            timetables = (await self.db.scalars(stmt)).all()
            return [
                timetable_with_course(t)
                for t in timetables
                if t.course_id is None or t.course_id in own_ids
            ]

        purchased = await self._purchased_course_ids(user.id)
        if course_id and course_id not in purchased:
            raise HTTPException(status_code=403, detail="Permission denied")
        if course_id:
            stmt = stmt.where(Timetable.course_id == course_id)
        timetables = (await self.db.scalars(stmt)).all()
        visible = []
        for t in timetables:
            if t.course_id:
                if t.course_id in purchased:
                    visible.append(timetable_with_course(t))
            elif timetable_targets_student(t, user):
                visible.append(timetable_with_course(t))
        return visible

    async def get_timetable_async(self, timetable_id: uuid.UUID, user: User) -> dict[str, Any]:
        timetable = await self._get(timetable_id)
        if not await self._visible_to(timetable, user):
            raise HTTPException(status_code=403, detail="Permission denied")
        return timetable_with_course(timetable)

    async def list_course_timetables_async(self, course_id: uuid.UUID, user: User) -> list[dict[str, Any]]:
        course = await self.db.scalar(select(Course).where(Course.id == course_id))
        if not course:
            raise HTTPException(status_code=404, detail="Course not found")
        if user.role == Role.TEACHER and course.user_id != user.id:
            raise HTTPException(status_code=403, detail="Permission denied")
        if user.role == Role.USER and course_id not in await self._purchased_course_ids(user.id):
            raise HTTPException(status_code=403, detail="Permission denied")

        timetables = (
            await self.db.scalars(_ordered(_with_course(select(Timetable)).where(Timetable.course_id == course_id)))
        ).all()
        return [timetable_with_course(t) for t in timetables]

    # ==============================
    # ✏️ WRITE (ADMIN)
    # ==============================

    async def create_timetable_async(self, schema: CreateTimetable, admin: User) -> dict[str, Any]:
        try:
            check_time_range(schema.start_time, schema.end_time)
            if schema.course_id and not await self.db.scalar(select(Course.id).where(Course.id == schema.course_id)):
                raise HTTPException(status_code=404, detail="Course not found")

            data = schema.model_dump()
            if data["target_curriculum_type"] is not None:
                data["target_curriculum_type"] = data["target_curriculum_type"].value
            timetable = Timetable(**data, created_by=admin.id)
            self.db.add(timetable)
            await self.db.commit()
            logger.info(f"📅 Timetable {timetable.id} created by {admin.email}")
            return timetable_with_course(await self._get(timetable.id))
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Create timetable failed")
            raise HTTPException(status_code=500, detail=f"Create timetable failed: {e}")

    async def update_timetable_async(self, timetable_id: uuid.UUID, schema: UpdateTimetable) -> dict[str, Any]:
        try:
            timetable = await self._get(timetable_id)
            data = schema.model_dump(exclude_unset=True)

            check_time_range(
                data.get("start_time", timetable.start_time),
                data.get("end_time", timetable.end_time),
            )
            if data.get("course_id") and not await self.db.scalar(select(Course.id).where(Course.id == data["course_id"])):
                raise HTTPException(status_code=404, detail="Course not found")
            if data.get("target_curriculum_type") is not None:
                data["target_curriculum_type"] = data["target_curriculum_type"].value
            if "image_url" in data and not data["image_url"]:
                raise HTTPException(status_code=400, detail="Image URL is required")

            for key, value in data.items():
                setattr(timetable, key, value)
            await self.db.commit()
            return timetable_with_course(await self._get(timetable.id))
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Update timetable failed")
            raise HTTPException(status_code=500, detail=f"Update timetable failed: {e}")

    async def delete_timetable_async(self, timetable_id: uuid.UUID) -> None:
        try:
            timetable = await self._get(timetable_id)
            await self.db.delete(timetable)
            await self.db.commit()
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Delete timetable failed")
            raise HTTPException(status_code=500, detail=f"Delete timetable failed: {e}")
