from fastapi import APIRouter, Body, Depends, status

from academy.core.deps import AuthorizationService
from academy.core.enum import Role
from academy.schemas.user.subscription import CreateSubscription
from academy.services.user.subscriptions import SubscriptionService

router = APIRouter(tags=["User Subscriptions"])


@router.get("/subscription-plans")
async def list_plans(
    subscription_service: SubscriptionService = Depends(SubscriptionService),
):
    return await subscription_service.list_active_plans_async()


@router.post("/subscriptions", status_code=status.HTTP_201_CREATED)
async def create_subscription(
    schema: CreateSubscription = Body(...),
    authorization: AuthorizationService = Depends(AuthorizationService),
    subscription_service: SubscriptionService = Depends(SubscriptionService),
):
    user = await authorization.require_role([Role.USER])
    return await subscription_service.create_subscription_async(schema, user)


@router.get("/subscriptions")
async def list_my_subscriptions(
    authorization: AuthorizationService = Depends(AuthorizationService),
    subscription_service: SubscriptionService = Depends(SubscriptionService),
):
    user = await authorization.get_current_user()
    return await subscription_service.list_my_subscriptions_async(user)
