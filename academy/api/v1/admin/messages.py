import uuid

from fastapi import APIRouter, Body, Depends, status

from academy.core.deps import AuthorizationService
from academy.core.enum import STAFF_ROLES
from academy.schemas.admin.message import CreateMessage, UpdateMessage
from academy.services.admin.message import MessageService

router = APIRouter(prefix="/admin/messages", tags=["ADMIN MESSAGES"])


@router.get("")
async def list_messages(
    authorization: AuthorizationService = Depends(AuthorizationService),
    message_service: MessageService = Depends(MessageService),
):
    await authorization.require_role(STAFF_ROLES)
    return await message_service.list_messages_async()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_message(
    schema: CreateMessage = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    message_service: MessageService = Depends(MessageService),
):
    actor = await authorization.require_role(STAFF_ROLES)
    return await message_service.create_message_async(schema, actor)


@router.patch("/{message_id}")
async def update_message(
    message_id: uuid.UUID,
    schema: UpdateMessage = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    message_service: MessageService = Depends(MessageService),
):
    await authorization.require_role(STAFF_ROLES)
    return await message_service.update_message_async(message_id, schema)


@router.delete("/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_message(
    message_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    message_service: MessageService = Depends(MessageService),
):
    await authorization.require_role(STAFF_ROLES)
    await message_service.delete_message_async(message_id)
