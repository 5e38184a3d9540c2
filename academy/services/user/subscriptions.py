from typing import Any

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from academy.core.enum import SubscriptionRequestStatus, SubscriptionStatus
from academy.db.models.database import Subscription, SubscriptionPlan, SubscriptionRequest, User
from academy.db.session import get_session
from academy.libs.formats.records import plan_to_dict
from academy.schemas.user.subscription import CreateSubscription
from academy.services.shares.access import AccessService


def subscription_to_dict(subscription: Subscription) -> dict[str, Any]:
    return {
        "id": subscription.id,
        "status": subscription.status,
        "start_date": subscription.start_date,
        "end_date": subscription.end_date,
        "payment_image_url": subscription.payment_image_url,
        "created_at": subscription.created_at,
        "plan": plan_to_dict(subscription.plan),
        "requests": [
            {"id": r.id, "status": r.status, "reviewed_at": r.reviewed_at, "created_at": r.created_at}
            for r in subscription.requests
        ],
    }


class SubscriptionService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        access: AccessService = Depends(AccessService),
    ):
        self.db = db
        self.access = access

    async def list_active_plans_async(self) -> list[dict[str, Any]]:
        stmt = select(SubscriptionPlan).where(SubscriptionPlan.is_active.is_(True))
        plans = (await self.db.scalars(stmt.order_by(SubscriptionPlan.price))).all()
        return [plan_to_dict(p) for p in plans]

    async def _load(self, subscription_id) -> Subscription:
        return await self.db.scalar(
            select(Subscription)
            .where(Subscription.id == subscription_id)
            .options(selectinload(Subscription.plan), selectinload(Subscription.requests))
            .execution_options(populate_existing=True)
        )

    async def create_subscription_async(self, schema: CreateSubscription, user: User) -> dict[str, Any]:
        try:
            plan = await self.db.scalar(select(SubscriptionPlan).where(SubscriptionPlan.id == schema.plan_id))
            if not plan or not plan.is_active:
                raise HTTPException(status_code=404, detail="Plan not found or inactive")

            existing = await self.db.scalar(
                select(Subscription.id).where(
                    Subscription.user_id == user.id,
                    Subscription.plan_id == plan.id,
                    Subscription.status.in_([SubscriptionStatus.PENDING, SubscriptionStatus.ACTIVE]),
                )
            )
            if existing:
                raise HTTPException(
                    status_code=400,
                    detail="You already have an active or pending subscription for this plan",
                )

            subscription = Subscription(
                user_id=user.id,
                plan_id=plan.id,
                status=SubscriptionStatus.PENDING,
                payment_image_url=schema.payment_image_url,
            )
            self.db.add(subscription)
            await self.db.flush()
            self.db.add(SubscriptionRequest(subscription_id=subscription.id, status=SubscriptionRequestStatus.PENDING))
            await self.db.commit()
            logger.info(f"🧾 {user.email} requested plan '{plan.name}'")
            return subscription_to_dict(await self._load(subscription.id))
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Create subscription failed")
            raise HTTPException(status_code=500, detail=f"Create subscription failed: {e}")

    async def list_my_subscriptions_async(self, user: User) -> list[dict[str, Any]]:
        await self.access.grant_access_for_user(user.id)
        await self.db.commit()
        subscriptions = (
            await self.db.scalars(
                select(Subscription)
                .where(Subscription.user_id == user.id)
                .options(selectinload(Subscription.plan), selectinload(Subscription.requests))
                .order_by(Subscription.created_at.desc())
            )
        ).all()
        return [subscription_to_dict(s) for s in subscriptions]
