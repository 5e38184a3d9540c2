import uuid
from typing import Any

from fastapi import Depends, HTTPException
from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from academy.core.enum import STAFF_ROLES, PurchaseStatus, Role, SubscriptionStatus
from academy.db.models.database import Course, Purchase, Subscription, SubscriptionPlan, User
from academy.db.session import get_session
from academy.libs.formats.datetime import now as get_now


def course_matches_plan(course: Course, plan: SubscriptionPlan) -> bool:
    """A plan covers a course on equal curriculum and grade; a plan level, when set, must match too."""
    return (
        course.target_curriculum == plan.curriculum
        and course.target_grade == plan.grade
        and (not plan.level or course.target_level == plan.level)
    )


def plan_grants_course(course: Course, plan: SubscriptionPlan) -> bool:
    """Publishing grants a course to a plan when either side leaves the level open."""
    return (
        course.target_curriculum == plan.curriculum
        and course.target_grade == plan.grade
        and (not plan.level or not course.target_level or course.target_level == plan.level)
    )


def matching_courses_stmt(plan: SubscriptionPlan):
    stmt = select(Course).where(
        Course.is_published.is_(True),
        Course.target_curriculum == plan.curriculum,
        Course.target_grade == plan.grade,
    )
    if plan.level:
        stmt = stmt.where(Course.target_level == plan.level)
    return stmt


class AccessService:
    """Course visibility, purchases and subscription-granted access."""

    def __init__(self, db: AsyncSession = Depends(get_session)):
        self.db = db

    # ==============================
    # 🔎 LOOKUPS
    # ==============================

    async def get_course_or_404(self, course_id: uuid.UUID, published_only: bool = False) -> Course:
        stmt = select(Course).where(Course.id == course_id)
        if published_only:
            stmt = stmt.where(Course.is_published.is_(True))
        course = await self.db.scalar(stmt)
        if not course:
            raise HTTPException(status_code=404, detail="Course not found")
        return course

    async def get_owned_course(self, course_id: uuid.UUID, user: User) -> Course:
        """Course the user may edit: its creator or any ADMIN."""
        course = await self.get_course_or_404(course_id)
        if user.role != Role.ADMIN and course.user_id != user.id:
            raise HTTPException(status_code=403, detail="You do not own this course")
        return course

    @staticmethod
    def can_manage(user: User, course: Course) -> bool:
        return user.role in STAFF_ROLES or course.user_id == user.id

    # ==============================
    # 💳 PURCHASES
    # ==============================

    async def upsert_purchase(self, user_id: uuid.UUID, course_id: uuid.UUID) -> bool:
        """Make the (user, course) purchase ACTIVE. Returns True when something changed."""
        purchase = await self.db.scalar(
            select(Purchase).where(Purchase.user_id == user_id, Purchase.course_id == course_id)
        )
        if purchase:
            if purchase.status == PurchaseStatus.ACTIVE:
                return False
            purchase.status = PurchaseStatus.ACTIVE
            return True
        self.db.add(Purchase(user_id=user_id, course_id=course_id, status=PurchaseStatus.ACTIVE))
        return True

    async def has_active_purchase(self, user_id: uuid.UUID, course_id: uuid.UUID) -> bool:
        purchase_id = await self.db.scalar(
            select(Purchase.id).where(
                Purchase.user_id == user_id,
                Purchase.course_id == course_id,
                Purchase.status == PurchaseStatus.ACTIVE,
            )
        )
        return purchase_id is not None

    # ==============================
    # 📅 SUBSCRIPTIONS
    # ==============================

    async def grant_subscription_courses(self, subscription: Subscription) -> int:
        courses = (await self.db.scalars(matching_courses_stmt(subscription.plan))).all()
        granted = 0
        for course in courses:
            if await self.upsert_purchase(subscription.user_id, course.id):
                granted += 1
        return granted

    async def expire_subscription(self, subscription: Subscription) -> None:
        subscription.status = SubscriptionStatus.EXPIRED
        course_ids = select(Course.id).where(
            Course.is_published.is_(True),
            Course.target_curriculum == subscription.plan.curriculum,
            Course.target_grade == subscription.plan.grade,
        )
        if subscription.plan.level:
            course_ids = course_ids.where(Course.target_level == subscription.plan.level)
        await self.db.execute(
            update(Purchase)
            .where(
                Purchase.user_id == subscription.user_id,
                Purchase.status == PurchaseStatus.ACTIVE,
                Purchase.course_id.in_(course_ids),
            )
            .values(status=PurchaseStatus.INACTIVE)
            .execution_options(synchronize_session=False)
        )
        logger.info(f"⌛ Subscription {subscription.id} expired for user {subscription.user_id}")

    async def refresh_user_subscriptions(self, user_id: uuid.UUID) -> list[Subscription]:
        """Expire the user's lapsed ACTIVE subscriptions; return the ones still active.

        Changes are flushed, not committed.
        """
        subscriptions = (
            await self.db.scalars(
                select(Subscription)
                .where(Subscription.user_id == user_id, Subscription.status == SubscriptionStatus.ACTIVE)
                .options(selectinload(Subscription.plan))
            )
        ).all()
        current = get_now()
        active: list[Subscription] = []
        for subscription in subscriptions:
            if subscription.end_date and subscription.end_date < current:
                await self.expire_subscription(subscription)
            else:
                active.append(subscription)
        await self.db.flush()
        return active

    async def grant_access_for_user(self, user_id: uuid.UUID) -> int:
        granted = 0
        for subscription in await self.refresh_user_subscriptions(user_id):
            granted += await self.grant_subscription_courses(subscription)
        return granted

    async def grant_course_to_subscriptions(self, course: Course) -> int:
        """Grant a newly published course to every ACTIVE subscription whose plan covers it."""
        if not course.is_published or not course.target_curriculum or not course.target_grade:
            return 0
        subscriptions = (
            await self.db.scalars(
                select(Subscription)
                .join(SubscriptionPlan, SubscriptionPlan.id == Subscription.plan_id)
                .where(
                    Subscription.status == SubscriptionStatus.ACTIVE,
                    SubscriptionPlan.curriculum == course.target_curriculum,
                    SubscriptionPlan.grade == course.target_grade,
                )
                .options(selectinload(Subscription.plan))
            )
        ).all()
        granted = 0
        for subscription in subscriptions:
            if plan_grants_course(course, subscription.plan):
                if await self.upsert_purchase(subscription.user_id, course.id):
                    granted += 1
        return granted

    # ==============================
    # 🔐 ACCESS CHECKS
    # ==============================

    async def check_course_access(self, user: User, course: Course) -> dict[str, Any]:
        if course.is_free or self.can_manage(user, course):
            return {"has_access": True, "subscription_expired": False}

        if await self.has_active_purchase(user.id, course.id):
            return {"has_access": True, "subscription_expired": False}

        active = await self.refresh_user_subscriptions(user.id)
        await self.db.commit()
        if any(course_matches_plan(course, s.plan) for s in active):
            return {"has_access": True, "subscription_expired": False}

        expired = await self.db.scalar(
            select(Subscription)
            .where(Subscription.user_id == user.id, Subscription.status == SubscriptionStatus.EXPIRED)
            .options(selectinload(Subscription.plan))
            .order_by(Subscription.end_date.desc())
            .limit(1)
        )
        if expired and course_matches_plan(course, expired.plan):
            return {
                "has_access": False,
                "subscription_expired": True,
                "subscription_end_date": expired.end_date,
            }
        return {"has_access": False, "subscription_expired": False}

    async def require_course_access(self, user: User, course: Course) -> None:
        access = await self.check_course_access(user, course)
        if access["has_access"]:
            return
        if access["subscription_expired"]:
            raise HTTPException(
                status_code=403,
                detail={
                    "error": "SUBSCRIPTION_EXPIRED",
                    "subscription_end_date": str(access["subscription_end_date"]),
                },
            )
        raise HTTPException(status_code=403, detail="Course access required")
