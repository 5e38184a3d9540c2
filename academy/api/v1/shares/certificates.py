import uuid

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi_pagination import Page

from academy.core.deps import AuthorizationService
from academy.core.enum import GRADER_ROLES, Role
from academy.schemas.shares.certificate import CertificateOut, CreateCertificate
from academy.services.shares.certificates import CertificateService

router = APIRouter(prefix="/certificates", tags=["Certificates"])


@router.get("/my-certificates")
async def my_certificates(
    authorization: AuthorizationService = Depends(AuthorizationService),
    certificate_service: CertificateService = Depends(CertificateService),
):
    user = await authorization.require_role([Role.USER])
    return await certificate_service.list_my_certificates_async(user)


@router.get("", response_model=Page[CertificateOut])
async def list_certificates(
    student_id: uuid.UUID | None = Query(None),
    authorization: AuthorizationService = Depends(AuthorizationService),
    certificate_service: CertificateService = Depends(CertificateService),
):
    actor = await authorization.require_role(GRADER_ROLES)
    return await certificate_service.list_certificates_async(actor, student_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_certificate(
    schema: CreateCertificate = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    certificate_service: CertificateService = Depends(CertificateService),
):
    actor = await authorization.require_role(GRADER_ROLES)
    return await certificate_service.create_certificate_async(schema, actor)


@router.delete("/{certificate_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_certificate(
    certificate_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    certificate_service: CertificateService = Depends(CertificateService),
):
    actor = await authorization.require_role(GRADER_ROLES)
    await certificate_service.delete_certificate_async(certificate_id, actor)
