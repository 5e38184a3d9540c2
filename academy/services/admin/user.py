import uuid
from io import BytesIO
from typing import Any

import pandas as pd
from fastapi import Depends, HTTPException, Response
from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.enum import STAFF_ROLES, Role
from academy.core.security import SecurityService
from academy.db.models.database import Course, User
from academy.db.session import get_session
from academy.libs.curriculum import is_valid_selection
from academy.libs.filters import FilterState, page_envelope
from academy.libs.formats.datetime import now as get_now
from academy.libs.formats.records import user_to_dict
from academy.schemas.auth.user import EditUser, SuspendUser, UpdateBalance
from academy.services.shares.user_query import build_user_query, fetch_user_page


class UserService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        security: SecurityService = Depends(SecurityService),
    ):
        self.db = db
        self.security = security

    async def _get_user_or_404(self, user_id: uuid.UUID) -> User:
        user = await self.db.scalar(select(User).where(User.id == user_id))
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    async def get_users_async(
        self,
        filters: FilterState,
        role: Role | None,
        page: int,
        size: int,
    ) -> dict[str, Any]:
        rows, total_items = await fetch_user_page(
            self.db, filters, page, size, roles=[role] if role else None
        )
        items = [
            {**user_to_dict(user), "purchases_count": purchases, "completed_chapters": completed}
            for user, purchases, completed in rows
        ]
        return page_envelope(items, page, size, total_items)

    async def update_user_async(self, user_id: uuid.UUID, schema: EditUser, actor: User) -> dict[str, Any]:
        try:
            user = await self._get_user_or_404(user_id)
            data = schema.model_dump(exclude_unset=True)

            # 🔹 supervisors may only edit students and never change roles
            if actor.role != Role.ADMIN and (user.role in STAFF_ROLES or "role" in data):
                raise HTTPException(status_code=403, detail="Permission denied")

            if data.get("email") and data["email"] != user.email:
                taken = await self.db.scalar(select(User.id).where(User.email == data["email"], User.id != user_id))
                if taken:
                    raise HTTPException(status_code=409, detail="Email already in use")
            if data.get("phone_number") and data["phone_number"] != user.phone_number:
                taken = await self.db.scalar(
                    select(User.id).where(User.phone_number == data["phone_number"], User.id != user_id)
                )
                if taken:
                    raise HTTPException(status_code=409, detail="Phone number already in use")

            password = data.pop("password", None)
            if password:
                user.password = await self.security.hash_password(password)

            for key, value in data.items():
                setattr(user, key, value)

            if not is_valid_selection(user.curriculum, user.level, user.language, user.grade):
                raise HTTPException(status_code=400, detail="Invalid curriculum selection")

            user.updated_at = get_now()
            await self.db.commit()
            await self.db.refresh(user)
            logger.info(f"✏ {actor.email} updated user {user.email}")
            return user_to_dict(user)
        except HTTPException:
            await self.db.rollback()
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Update user failed")
            raise HTTPException(status_code=500, detail=f"Update user failed: {e}")

    async def suspend_user_async(self, user_id: uuid.UUID, schema: SuspendUser) -> dict[str, Any]:
        try:
            user = await self._get_user_or_404(user_id)
            if user.role in STAFF_ROLES:
                raise HTTPException(status_code=400, detail="Cannot suspend admin or supervisor accounts")
            user.is_suspended = schema.is_suspended
            user.updated_at = get_now()
            await self.db.commit()
            await self.db.refresh(user)
            logger.warning(f"⛔ User {user.email} suspended={user.is_suspended}")
            return user_to_dict(user)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Suspend user failed")
            raise HTTPException(status_code=500, detail=f"Suspend user failed: {e}")

    async def update_balance_async(self, user_id: uuid.UUID, schema: UpdateBalance) -> dict[str, Any]:
        try:
            user = await self._get_user_or_404(user_id)
            user.balance = schema.new_balance
            user.updated_at = get_now()
            await self.db.commit()
            await self.db.refresh(user)
            logger.info(f"💰 Balance of {user.email} set to {user.balance}")
            return user_to_dict(user)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Update balance failed")
            raise HTTPException(status_code=500, detail=f"Update balance failed: {e}")

    async def delete_user_async(self, user_id: uuid.UUID, actor: User) -> None:
        try:
            if user_id == actor.id:
                raise HTTPException(status_code=400, detail="Cannot delete your own account")
            user = await self._get_user_or_404(user_id)
            owned = await self.db.scalar(select(func.count(Course.id)).where(Course.user_id == user.id))
            if owned:
                raise HTTPException(status_code=400, detail="User still owns courses")
            await self.db.delete(user)
            await self.db.commit()
            logger.warning(f"🗑 User {user.email} deleted by {actor.email}")
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Delete user failed")
            raise HTTPException(status_code=500, detail=f"Delete user failed: {e}")

    async def export_users_async(self, filters: FilterState, role: Role | None) -> Response:
        stmt = build_user_query(filters, [role] if role else None).order_by(User.created_at.desc())
        rows = (await self.db.execute(stmt)).all()

        users = [
            {
                "ID": str(user.id),
                "Full name": user.full_name,
                "Email": user.email,
                "Phone": user.phone_number,
                "Role": user.role.value,
                "Curriculum": user.curriculum,
                "Level": user.level,
                "Language": user.language,
                "Grade": user.grade,
                "Balance": float(user.balance or 0),
                "Points": user.points,
                "Purchases": purchases or 0,
                "Completed chapters": completed or 0,
                "Suspended": user.is_suspended,
                "Created at": user.created_at,
            }
            for user, purchases, completed in rows
        ]
        df = pd.DataFrame(
            users,
            columns=[
                "ID",
                "Full name",
                "Email",
                "Phone",
                "Role",
                "Curriculum",
                "Level",
                "Language",
                "Grade",
                "Balance",
                "Points",
                "Purchases",
                "Completed chapters",
                "Suspended",
                "Created at",
            ],
        )

        output = BytesIO()
        df.to_excel(output, index=False, engine="openpyxl")
        output.seek(0)

        headers = {"Content-Disposition": "attachment; filename=users_export.xlsx"}
        return Response(
            content=output.getvalue(),
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            headers=headers,
        )
