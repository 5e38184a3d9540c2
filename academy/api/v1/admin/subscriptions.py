import uuid

from fastapi import APIRouter, Body, Depends, Query, status

from academy.core.deps import AuthorizationService
from academy.core.enum import STAFF_ROLES, Role, SubscriptionRequestStatus
from academy.schemas.admin.subscription import CreatePlan, GrantAccess, ReviewRequest, UpdatePlan
from academy.services.admin.subscription import SubscriptionAdminService

router = APIRouter(prefix="/admin", tags=["ADMIN SUBSCRIPTIONS"])


# ==============================
# 📨 REQUESTS
# ==============================


@router.get("/subscription-requests")
async def list_requests(
    curriculum: str | None = Query(None),
    level: str | None = Query(None),
    language: str | None = Query(None),
    grade: str | None = Query(None),
    status: SubscriptionRequestStatus | None = Query(None),
    authorization: AuthorizationService = Depends(AuthorizationService),
    subscription_service: SubscriptionAdminService = Depends(SubscriptionAdminService),
):
    await authorization.require_role(STAFF_ROLES)
    return await subscription_service.list_requests_async(curriculum, level, language, grade, status)


@router.patch("/subscription-requests/{request_id}")
async def review_request(
    request_id: uuid.UUID,
    schema: ReviewRequest = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    subscription_service: SubscriptionAdminService = Depends(SubscriptionAdminService),
):
    admin = await authorization.require_role(STAFF_ROLES)
    return await subscription_service.review_request_async(request_id, schema, admin)


@router.post("/subscriptions/grant-access")
async def grant_access(
    schema: GrantAccess | None = Body(None),
    authorization: AuthorizationService = Depends(AuthorizationService),
    subscription_service: SubscriptionAdminService = Depends(SubscriptionAdminService),
):
    await authorization.require_role([Role.ADMIN])
    return await subscription_service.grant_access_async(schema or GrantAccess())


# ==============================
# 🧾 PLANS
# ==============================


@router.get("/subscription-plans")
async def list_plans(
    authorization: AuthorizationService = Depends(AuthorizationService),
    subscription_service: SubscriptionAdminService = Depends(SubscriptionAdminService),
):
    await authorization.require_role(STAFF_ROLES)
    return await subscription_service.list_plans_async()


@router.post("/subscription-plans", status_code=status.HTTP_201_CREATED)
async def create_plan(
    schema: CreatePlan = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    subscription_service: SubscriptionAdminService = Depends(SubscriptionAdminService),
):
    await authorization.require_role([Role.ADMIN])
    return await subscription_service.create_plan_async(schema)


@router.patch("/subscription-plans/{plan_id}")
async def update_plan(
    plan_id: uuid.UUID,
    schema: UpdatePlan = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    subscription_service: SubscriptionAdminService = Depends(SubscriptionAdminService),
):
    await authorization.require_role([Role.ADMIN])
    return await subscription_service.update_plan_async(plan_id, schema)


@router.delete("/subscription-plans/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_plan(
    plan_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    subscription_service: SubscriptionAdminService = Depends(SubscriptionAdminService),
):
    await authorization.require_role([Role.ADMIN])
    await subscription_service.delete_plan_async(plan_id)
