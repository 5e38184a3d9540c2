import uuid
from typing import Any

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.db.models.database import LiveStream, LiveStreamAttendance, User
from academy.db.session import get_session
from academy.libs.formats.records import livestream_to_dict
from academy.services.shares.access import AccessService
from academy.services.user.learning import next_content


class LiveStreamService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        access: AccessService = Depends(AccessService),
    ):
        self.db = db
        self.access = access

    async def _get_stream(self, course_id: uuid.UUID, stream_id: uuid.UUID, user: User) -> LiveStream:
        course = await self.access.get_course_or_404(course_id)
        stream = await self.db.scalar(
            select(LiveStream).where(LiveStream.id == stream_id, LiveStream.course_id == course_id)
        )
        if not stream or not (self.access.can_manage(user, course) or (stream.is_published and course.is_published)):
            raise HTTPException(status_code=404, detail="Live stream not found")
        await self.access.require_course_access(user, course)
        return stream

    async def get_stream_async(self, course_id: uuid.UUID, stream_id: uuid.UUID, user: User) -> dict[str, Any]:
        stream = await self._get_stream(course_id, stream_id, user)
        attended = await self.db.scalar(
            select(LiveStreamAttendance.id).where(
                LiveStreamAttendance.live_stream_id == stream.id, LiveStreamAttendance.user_id == user.id
            )
        )
        following = await next_content(self.db, course_id, stream.id)
        data = livestream_to_dict(stream)
        data["has_attended"] = attended is not None
        data["next_content_id"] = following["id"] if following else None
        data["next_content_type"] = following["type"] if following else None
        return data

    async def attend_async(self, course_id: uuid.UUID, stream_id: uuid.UUID, user: User) -> dict[str, Any]:
        """Record attendance once per student; repeated calls return the first record."""
        try:
            stream = await self._get_stream(course_id, stream_id, user)
            attendance = await self.db.scalar(
                select(LiveStreamAttendance).where(
                    LiveStreamAttendance.live_stream_id == stream.id, LiveStreamAttendance.user_id == user.id
                )
            )
            if not attendance:
                attendance = LiveStreamAttendance(live_stream_id=stream.id, user_id=user.id)
                self.db.add(attendance)
                await self.db.commit()
                await self.db.refresh(attendance)
                logger.info(f"🎥 {user.email} joined live stream {stream.id}")
            return {
                "id": attendance.id,
                "live_stream_id": attendance.live_stream_id,
                "user_id": attendance.user_id,
                "joined_at": attendance.joined_at,
                "meeting_url": stream.meeting_url,
            }
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Attend live stream failed")
            raise HTTPException(status_code=500, detail=f"Attend live stream failed: {e}")
