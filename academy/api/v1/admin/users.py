import uuid

from fastapi import APIRouter, Body, Depends, Query, status

from academy.core.deps import AuthorizationService, filter_params
from academy.core.enum import STAFF_ROLES, Role
from academy.libs.filters import FilterState
from academy.schemas.auth.user import EditUser, SuspendUser, UpdateBalance
from academy.services.admin.user import UserService

router = APIRouter(prefix="/admin/users", tags=["ADMIN USER"])


@router.get("")
async def get_users(
    filters: FilterState = Depends(filter_params),
    role: Role | None = Query(None),
    page: int = Query(1, ge=1),
    size: int = Query(10, ge=1, le=100),
    authorization: AuthorizationService = Depends(AuthorizationService),
    user_service: UserService = Depends(UserService),
):
    await authorization.require_role(STAFF_ROLES)
    return await user_service.get_users_async(filters, role, page, size)


@router.get("/export")
async def export_users(
    filters: FilterState = Depends(filter_params),
    role: Role | None = Query(None),
    authorization: AuthorizationService = Depends(AuthorizationService),
    user_service: UserService = Depends(UserService),
):
    await authorization.require_role(STAFF_ROLES)
    return await user_service.export_users_async(filters, role)


@router.patch("/{user_id}")
async def update_user(
    user_id: uuid.UUID,
    schema: EditUser = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    user_service: UserService = Depends(UserService),
):
    actor = await authorization.require_role(STAFF_ROLES)
    return await user_service.update_user_async(user_id, schema, actor)


@router.patch("/{user_id}/suspend")
async def suspend_user(
    user_id: uuid.UUID,
    schema: SuspendUser = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    user_service: UserService = Depends(UserService),
):
    await authorization.require_role(STAFF_ROLES)
    return await user_service.suspend_user_async(user_id, schema)


@router.patch("/{user_id}/balance")
async def update_balance(
    user_id: uuid.UUID,
    schema: UpdateBalance = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    user_service: UserService = Depends(UserService),
):
    await authorization.require_role([Role.ADMIN])
    return await user_service.update_balance_async(user_id, schema)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    user_service: UserService = Depends(UserService),
):
    actor = await authorization.require_role([Role.ADMIN])
    await user_service.delete_user_async(user_id, actor)
