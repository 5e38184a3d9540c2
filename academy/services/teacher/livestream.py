import uuid
from typing import Any

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.enum import Role
from academy.db.models.database import Course, LiveStream, User
from academy.db.session import get_session
from academy.libs.formats.datetime import to_utc_naive
from academy.libs.formats.records import livestream_to_dict
from academy.schemas.teacher.course import PublishSchema
from academy.schemas.teacher.livestream import CreateLiveStream, UpdateLiveStream
from academy.services.shares.access import AccessService
from academy.services.teacher.course import next_content_position


class TeacherLiveStreamService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        access: AccessService = Depends(AccessService),
    ):
        self.db = db
        self.access = access

    async def _get_owned_stream(self, stream_id: uuid.UUID, user: User) -> LiveStream:
        stream = await self.db.scalar(select(LiveStream).where(LiveStream.id == stream_id))
        if not stream:
            raise HTTPException(status_code=404, detail="Live stream not found")
        await self.access.get_owned_course(stream.course_id, user)
        return stream

    async def create_stream_async(self, schema: CreateLiveStream, user: User) -> dict[str, Any]:
        try:
            await self.access.get_owned_course(schema.course_id, user)
            stream = LiveStream(
                course_id=schema.course_id,
                title=schema.title,
                description=schema.description,
                meeting_url=schema.meeting_url,
                scheduled_at=to_utc_naive(schema.scheduled_at),
                duration_minutes=schema.duration_minutes,
                position=await next_content_position(self.db, schema.course_id),
            )
            self.db.add(stream)
            await self.db.commit()
            await self.db.refresh(stream)
            logger.info(f"🎥 Live stream '{stream.title}' scheduled at {stream.scheduled_at}")
            return livestream_to_dict(stream)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Create live stream failed")
            raise HTTPException(status_code=500, detail=f"Create live stream failed: {e}")

    async def list_streams_async(self, user: User, course_id: uuid.UUID | None = None) -> list[dict[str, Any]]:
        stmt = select(LiveStream)
        if course_id:
            await self.access.get_owned_course(course_id, user)
            stmt = stmt.where(LiveStream.course_id == course_id)
        elif user.role != Role.ADMIN:
            stmt = stmt.join(Course, Course.id == LiveStream.course_id).where(Course.user_id == user.id)
        streams = (await self.db.scalars(stmt.order_by(LiveStream.scheduled_at.desc()))).all()
        return [livestream_to_dict(s) for s in streams]

    async def update_stream_async(self, stream_id: uuid.UUID, schema: UpdateLiveStream, user: User) -> dict[str, Any]:
        try:
            stream = await self._get_owned_stream(stream_id, user)
            for key, value in schema.model_dump(exclude_unset=True).items():
                if key == "scheduled_at":
                    value = to_utc_naive(value)
                setattr(stream, key, value)
            await self.db.commit()
            await self.db.refresh(stream)
            return livestream_to_dict(stream)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Update live stream failed")
            raise HTTPException(status_code=500, detail=f"Update live stream failed: {e}")

    async def delete_stream_async(self, stream_id: uuid.UUID, user: User) -> None:
        try:
            stream = await self._get_owned_stream(stream_id, user)
            await self.db.delete(stream)
            await self.db.commit()
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Delete live stream failed")
            raise HTTPException(status_code=500, detail=f"Delete live stream failed: {e}")

    async def publish_stream_async(self, stream_id: uuid.UUID, schema: PublishSchema, user: User) -> dict[str, Any]:
        try:
            stream = await self._get_owned_stream(stream_id, user)
            stream.is_published = schema.is_published
            await self.db.commit()
            await self.db.refresh(stream)
            return livestream_to_dict(stream)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Publish live stream failed")
            raise HTTPException(status_code=500, detail=f"Publish live stream failed: {e}")
