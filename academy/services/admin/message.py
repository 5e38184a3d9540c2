import uuid
from typing import Any

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from academy.core.settings import settings
from academy.db.models.database import StudentMessage, User
from academy.db.session import get_session
from academy.libs.curriculum import is_valid_selection
from academy.libs.formats.datetime import hours_ago
from academy.libs.formats.datetime import now as get_now
from academy.libs.formats.records import message_to_dict
from academy.schemas.admin.message import CreateMessage, UpdateMessage

TARGET_FIELDS = ("target_curriculum", "target_level", "target_language", "target_grade")


async def deactivate_stale_messages(db: AsyncSession) -> int:
    """Switch off active messages older than MESSAGE_TTL_HOURS. Not committed."""
    result = await db.execute(
        update(StudentMessage)
        .where(
            StudentMessage.is_active.is_(True),
            StudentMessage.created_at < hours_ago(settings.MESSAGE_TTL_HOURS),
        )
        .values(is_active=False)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0


def _with_creator(message: StudentMessage) -> dict[str, Any]:
    data = message_to_dict(message)
    data["creator"] = (
        {"id": message.creator.id, "full_name": message.creator.full_name} if message.creator else None
    )
    return data


class MessageService:
    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    @staticmethod
    def _check_targets(values: dict[str, Any]) -> None:
        if not is_valid_selection(*(values.get(f) for f in TARGET_FIELDS)):
            raise HTTPException(status_code=400, detail="Invalid curriculum selection")

    async def _get_message(self, message_id: uuid.UUID) -> StudentMessage:
        message = await self.db.scalar(
            select(StudentMessage)
            .where(StudentMessage.id == message_id)
            .options(selectinload(StudentMessage.creator))
            .execution_options(populate_existing=True)
        )
        if not message:
            raise HTTPException(status_code=404, detail="Message not found")
        return message

    async def list_messages_async(self) -> list[dict[str, Any]]:
        deactivated = await deactivate_stale_messages(self.db)
        await self.db.commit()
        if deactivated:
            logger.info(f"🔕 Deactivated {deactivated} stale messages")
        messages = (
            await self.db.scalars(
                select(StudentMessage)
                .options(selectinload(StudentMessage.creator))
                .order_by(StudentMessage.created_at.desc())
            )
        ).all()
        return [_with_creator(m) for m in messages]

    async def create_message_async(self, schema: CreateMessage, actor: User) -> dict[str, Any]:
        try:
            if not schema.message or not schema.message.strip():
                raise HTTPException(status_code=400, detail="Message is required")
            targets = {f: getattr(schema, f) or None for f in TARGET_FIELDS}
            self._check_targets(targets)
            message = StudentMessage(message=schema.message.strip(), created_by=actor.id, **targets)
            self.db.add(message)
            await self.db.commit()
            message = await self._get_message(message.id)
            logger.info(f"📢 Message {message.id} created by {actor.email}")
            return _with_creator(message)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Create message failed")
            raise HTTPException(status_code=500, detail=f"Create message failed: {e}")

    async def update_message_async(self, message_id: uuid.UUID, schema: UpdateMessage) -> dict[str, Any]:
        try:
            message = await self._get_message(message_id)
            data = schema.model_dump(exclude_unset=True)
            if "message" in data:
                if not data["message"] or not data["message"].strip():
                    raise HTTPException(status_code=400, detail="Message is required")
                data["message"] = data["message"].strip()
            for field in TARGET_FIELDS:
                if field in data:
                    data[field] = data[field] or None
            self._check_targets({f: data.get(f, getattr(message, f)) for f in TARGET_FIELDS})

            for key, value in data.items():
                setattr(message, key, value)
            message.updated_at = get_now()
            await self.db.commit()
            return _with_creator(message)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Update message failed")
            raise HTTPException(status_code=500, detail=f"Update message failed: {e}")

    async def delete_message_async(self, message_id: uuid.UUID) -> None:
        try:
            message = await self._get_message(message_id)
            await self.db.delete(message)
            await self.db.commit()
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Delete message failed")
            raise HTTPException(status_code=500, detail=f"Delete message failed: {e}")
