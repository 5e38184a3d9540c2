import uuid
from typing import Any

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.db.models.database import Attachment, Chapter, User
from academy.db.session import get_session
from academy.libs.formats.datetime import now as get_now
from academy.libs.formats.records import attachment_to_dict, chapter_to_dict
from academy.schemas.teacher.chapter import CreateAttachment, CreateChapter, UpdateChapter
from academy.schemas.teacher.course import PublishSchema
from academy.services.shares.access import AccessService
from academy.services.teacher.course import next_content_position


class TeacherChapterService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        access: AccessService = Depends(AccessService),
    ):
        self.db = db
        self.access = access

    async def _get_owned_chapter(self, course_id: uuid.UUID, chapter_id: uuid.UUID, user: User) -> Chapter:
        await self.access.get_owned_course(course_id, user)
        chapter = await self.db.scalar(
            select(Chapter).where(Chapter.id == chapter_id, Chapter.course_id == course_id)
        )
        if not chapter:
            raise HTTPException(status_code=404, detail="Chapter not found")
        return chapter

    async def create_chapter_async(self, course_id: uuid.UUID, schema: CreateChapter, user: User) -> dict[str, Any]:
        try:
            await self.access.get_owned_course(course_id, user)
            chapter = Chapter(
                course_id=course_id,
                position=await next_content_position(self.db, course_id),
                **schema.model_dump(),
            )
            self.db.add(chapter)
            await self.db.commit()
            await self.db.refresh(chapter)
            logger.info(f"📄 Chapter '{chapter.title}' added at position {chapter.position}")
            return chapter_to_dict(chapter)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Create chapter failed")
            raise HTTPException(status_code=500, detail=f"Create chapter failed: {e}")

    async def update_chapter_async(
        self, course_id: uuid.UUID, chapter_id: uuid.UUID, schema: UpdateChapter, user: User
    ) -> dict[str, Any]:
        try:
            chapter = await self._get_owned_chapter(course_id, chapter_id, user)
            for key, value in schema.model_dump(exclude_unset=True).items():
                setattr(chapter, key, value)
            chapter.updated_at = get_now()
            await self.db.commit()
            await self.db.refresh(chapter)
            return chapter_to_dict(chapter)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Update chapter failed")
            raise HTTPException(status_code=500, detail=f"Update chapter failed: {e}")

    async def delete_chapter_async(self, course_id: uuid.UUID, chapter_id: uuid.UUID, user: User) -> None:
        try:
            chapter = await self._get_owned_chapter(course_id, chapter_id, user)
            await self.db.delete(chapter)
            await self.db.commit()
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Delete chapter failed")
            raise HTTPException(status_code=500, detail=f"Delete chapter failed: {e}")

    async def publish_chapter_async(
        self, course_id: uuid.UUID, chapter_id: uuid.UUID, schema: PublishSchema, user: User
    ) -> dict[str, Any]:
        try:
            chapter = await self._get_owned_chapter(course_id, chapter_id, user)
            chapter.is_published = schema.is_published
            chapter.updated_at = get_now()
            await self.db.commit()
            await self.db.refresh(chapter)
            return chapter_to_dict(chapter)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Publish chapter failed")
            raise HTTPException(status_code=500, detail=f"Publish chapter failed: {e}")

    async def add_attachment_async(
        self, course_id: uuid.UUID, chapter_id: uuid.UUID, schema: CreateAttachment, user: User
    ) -> dict[str, Any]:
        try:
            await self._get_owned_chapter(course_id, chapter_id, user)
            attachment = Attachment(chapter_id=chapter_id, name=schema.name, url=schema.url)
            self.db.add(attachment)
            await self.db.commit()
            await self.db.refresh(attachment)
            return attachment_to_dict(attachment)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Add attachment failed")
            raise HTTPException(status_code=500, detail=f"Add attachment failed: {e}")

    async def delete_attachment_async(
        self, course_id: uuid.UUID, chapter_id: uuid.UUID, attachment_id: uuid.UUID, user: User
    ) -> None:
        try:
            await self._get_owned_chapter(course_id, chapter_id, user)
            attachment = await self.db.scalar(
                select(Attachment).where(Attachment.id == attachment_id, Attachment.chapter_id == chapter_id)
            )
            if not attachment:
                raise HTTPException(status_code=404, detail="Attachment not found")
            await self.db.delete(attachment)
            await self.db.commit()
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Delete attachment failed")
            raise HTTPException(status_code=500, detail=f"Delete attachment failed: {e}")
