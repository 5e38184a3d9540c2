import uuid
from typing import Any

from fastapi import Depends, HTTPException
from fastapi_pagination import Page
from fastapi_pagination.ext.sqlalchemy import paginate
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from academy.core.enum import Role
from academy.db.models.database import Certificate, User
from academy.db.session import get_session
from academy.schemas.shares.certificate import CertificateOut, CreateCertificate


def certificate_out(certificate: Certificate) -> CertificateOut:
    return CertificateOut(
        id=certificate.id,
        student_id=certificate.student_id,
        student_name=certificate.student.full_name if certificate.student else None,
        assigned_by=certificate.assigned_by,
        assigned_by_name=certificate.assigner.full_name if certificate.assigner else None,
        image_url=certificate.image_url,
        title=certificate.title,
        description=certificate.description,
        created_at=certificate.created_at,
    )


def _with_people(stmt):
    return stmt.options(selectinload(Certificate.student), selectinload(Certificate.assigner))


class CertificateService:
    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    async def create_certificate_async(self, schema: CreateCertificate, actor: User) -> CertificateOut:
        try:
            student = await self.db.scalar(
                select(User).where(User.id == schema.student_id, User.role == Role.USER)
            )
            if not student:
                raise HTTPException(status_code=404, detail="Student not found")

            certificate = Certificate(**schema.model_dump(), assigned_by=actor.id)
            self.db.add(certificate)
            await self.db.commit()
            logger.info(f"🎓 Certificate {certificate.id} assigned to {student.email} by {actor.email}")

            certificate = await self.db.scalar(
                _with_people(select(Certificate).where(Certificate.id == certificate.id))
            )
            return certificate_out(certificate)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Create certificate failed")
            raise HTTPException(status_code=500, detail=f"Create certificate failed: {e}")

    async def list_certificates_async(self, actor: User, student_id: uuid.UUID | None = None) -> Page[CertificateOut]:
        stmt = _with_people(select(Certificate))
        if actor.role == Role.TEACHER:
            stmt = stmt.where(Certificate.assigned_by == actor.id)
        if student_id:
            stmt = stmt.where(Certificate.student_id == student_id)
        stmt = stmt.order_by(Certificate.created_at.desc())

        return await paginate(
            self.db,
            stmt,
            transformer=lambda items: [certificate_out(c) for c in items],
        )

    async def list_my_certificates_async(self, user: User) -> list[dict[str, Any]]:
        certificates = (
            await self.db.scalars(
                _with_people(select(Certificate))
                .where(Certificate.student_id == user.id)
                .order_by(Certificate.created_at.desc())
            )
        ).all()
        return [certificate_out(c).model_dump() for c in certificates]

    async def delete_certificate_async(self, certificate_id: uuid.UUID, actor: User) -> None:
        try:
            certificate = await self.db.scalar(select(Certificate).where(Certificate.id == certificate_id))
            if not certificate:
                raise HTTPException(status_code=404, detail="Certificate not found")
            if actor.role == Role.TEACHER and certificate.assigned_by != actor.id:
                raise HTTPException(status_code=403, detail="Permission denied")
            await self.db.delete(certificate)
            await self.db.commit()
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Delete certificate failed")
            raise HTTPException(status_code=500, detail=f"Delete certificate failed: {e}")
