import uuid
from datetime import timedelta
from typing import Any

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from academy.core.enum import SubscriptionRequestStatus, SubscriptionStatus
from academy.db.models.database import Subscription, SubscriptionPlan, SubscriptionRequest, User
from academy.db.session import get_session
from academy.libs.curriculum import is_valid_selection
from academy.libs.formats.datetime import now as get_now
from academy.libs.formats.records import plan_to_dict
from academy.schemas.admin.subscription import CreatePlan, GrantAccess, ReviewRequest, UpdatePlan
from academy.services.shares.access import AccessService


def request_to_dict(request: SubscriptionRequest) -> dict[str, Any]:
    subscription = request.subscription
    return {
        "id": request.id,
        "status": request.status,
        "reviewed_by": request.reviewed_by,
        "reviewed_at": request.reviewed_at,
        "created_at": request.created_at,
        "subscription": {
            "id": subscription.id,
            "status": subscription.status,
            "start_date": subscription.start_date,
            "end_date": subscription.end_date,
            "payment_image_url": subscription.payment_image_url,
            "plan": plan_to_dict(subscription.plan),
            "user": {
                "id": subscription.user.id,
                "full_name": subscription.user.full_name,
                "email": subscription.user.email,
                "phone_number": subscription.user.phone_number,
            },
        },
    }


class SubscriptionAdminService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        access: AccessService = Depends(AccessService),
    ):
        self.db = db
        self.access = access

    # ==============================
    # 📨 REQUESTS
    # ==============================

    async def list_requests_async(
        self,
        curriculum: str | None,
        level: str | None,
        language: str | None,
        grade: str | None,
        status: SubscriptionRequestStatus | None,
    ) -> list[dict[str, Any]]:
        stmt = (
            select(SubscriptionRequest)
            .join(Subscription, Subscription.id == SubscriptionRequest.subscription_id)
            .join(SubscriptionPlan, SubscriptionPlan.id == Subscription.plan_id)
            .options(
                selectinload(SubscriptionRequest.subscription).selectinload(Subscription.plan),
                selectinload(SubscriptionRequest.subscription).selectinload(Subscription.user),
            )
        )
        if status:
            stmt = stmt.where(SubscriptionRequest.status == status)
        if curriculum:
            stmt = stmt.where(SubscriptionPlan.curriculum == curriculum)
        if level:
            stmt = stmt.where(SubscriptionPlan.level == level)
        if language:
            stmt = stmt.where(SubscriptionPlan.language == language)
        if grade:
            stmt = stmt.where(SubscriptionPlan.grade == grade)

        requests = (await self.db.scalars(stmt.order_by(SubscriptionRequest.created_at.desc()))).all()
        return [request_to_dict(r) for r in requests]

    async def review_request_async(self, request_id: uuid.UUID, schema: ReviewRequest, admin: User) -> dict[str, Any]:
        try:
            request = await self.db.scalar(
                select(SubscriptionRequest)
                .where(SubscriptionRequest.id == request_id)
                .options(selectinload(SubscriptionRequest.subscription).selectinload(Subscription.plan))
            )
            if not request:
                raise HTTPException(status_code=404, detail="Request not found")
            if request.status != SubscriptionRequestStatus.PENDING:
                raise HTTPException(status_code=400, detail="Request already processed")

            approve = schema.action == "approve"
            request.status = SubscriptionRequestStatus.APPROVED if approve else SubscriptionRequestStatus.DENIED
            request.reviewed_by = admin.id
            request.reviewed_at = get_now()

            subscription = request.subscription
            granted = 0
            if approve:
                subscription.status = SubscriptionStatus.ACTIVE
                subscription.start_date = get_now()
                subscription.end_date = subscription.start_date + timedelta(days=subscription.plan.duration_days)
                granted = await self.access.grant_subscription_courses(subscription)
            else:
                subscription.status = SubscriptionStatus.DENIED

            await self.db.commit()
            logger.info(f"📨 Subscription request {request.id} {request.status.value}, {granted} courses granted")
            return {"success": True, "status": request.status, "courses_granted": granted}
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Review subscription request failed")
            raise HTTPException(status_code=500, detail=f"Review subscription request failed: {e}")

    async def grant_access_async(self, schema: GrantAccess) -> dict[str, Any]:
        """Re-grant subscription courses for one user, or for every user with an active subscription."""
        try:
            if schema.user_id:
                user_ids = [schema.user_id]
            else:
                user_ids = list(
                    set(
                        (
                            await self.db.scalars(
                                select(Subscription.user_id).where(
                                    Subscription.status == SubscriptionStatus.ACTIVE
                                )
                            )
                        ).all()
                    )
                )
            granted = 0
            for user_id in user_ids:
                granted += await self.access.grant_access_for_user(user_id)
            await self.db.commit()
            logger.info(f"🔓 Granted {granted} courses across {len(user_ids)} users")
            return {"success": True, "users_processed": len(user_ids), "courses_granted": granted}
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Grant access failed")
            raise HTTPException(status_code=500, detail=f"Grant access failed: {e}")

    # ==============================
    # 🧾 PLANS
    # ==============================

    async def _get_plan(self, plan_id: uuid.UUID) -> SubscriptionPlan:
        plan = await self.db.scalar(select(SubscriptionPlan).where(SubscriptionPlan.id == plan_id))
        if not plan:
            raise HTTPException(status_code=404, detail="Plan not found")
        return plan

    async def list_plans_async(self) -> list[dict[str, Any]]:
        plans = (await self.db.scalars(select(SubscriptionPlan).order_by(SubscriptionPlan.created_at.desc()))).all()
        return [plan_to_dict(p) for p in plans]

    async def create_plan_async(self, schema: CreatePlan) -> dict[str, Any]:
        try:
            if not is_valid_selection(schema.curriculum, schema.level, schema.language, schema.grade):
                raise HTTPException(status_code=400, detail="Invalid curriculum selection")
            plan = SubscriptionPlan(**schema.model_dump())
            self.db.add(plan)
            await self.db.commit()
            await self.db.refresh(plan)
            return plan_to_dict(plan)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Create plan failed")
            raise HTTPException(status_code=500, detail=f"Create plan failed: {e}")

    async def update_plan_async(self, plan_id: uuid.UUID, schema: UpdatePlan) -> dict[str, Any]:
        try:
            plan = await self._get_plan(plan_id)
            for key, value in schema.model_dump(exclude_unset=True).items():
                setattr(plan, key, value)
            if not plan.curriculum or not plan.grade or not is_valid_selection(
                plan.curriculum, plan.level, plan.language, plan.grade
            ):
                raise HTTPException(status_code=400, detail="Invalid curriculum selection")
            await self.db.commit()
            await self.db.refresh(plan)
            return plan_to_dict(plan)
        except HTTPException:
            await self.db.rollback()
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Update plan failed")
            raise HTTPException(status_code=500, detail=f"Update plan failed: {e}")

    async def delete_plan_async(self, plan_id: uuid.UUID) -> None:
        try:
            plan = await self._get_plan(plan_id)
            await self.db.delete(plan)
            await self.db.commit()
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Delete plan failed")
            raise HTTPException(status_code=500, detail=f"Delete plan failed: {e}")
