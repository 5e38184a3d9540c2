from datetime import datetime
from typing import Callable

from apscheduler.jobstores.base import ConflictingIdError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from academy.core.enum import SubscriptionStatus
from academy.db.models.database import Subscription
from academy.db.session import AsyncSessionLocal
from academy.libs.formats.datetime import now as get_now
from academy.services.admin.message import deactivate_stale_messages
from academy.services.shares.access import AccessService

scheduler = AsyncIOScheduler()

SessionFactory = Callable[[], AsyncSession]


# ================================
# JOB 1: stale dashboard messages
# ================================
async def deactivate_stale_messages_job(session_factory: SessionFactory = AsyncSessionLocal) -> int:
    logger.info("🔎 Running stale message job...")

    async with session_factory() as session:
        try:
            count = await deactivate_stale_messages(session)
            await session.commit()
            logger.success(f"✔ Deactivated {count} messages")
            return count
        except Exception as e:
            await session.rollback()
            logger.error(f"❌ Stale message job error: {e}")
            return 0


# ================================
# JOB 2: lapsed subscriptions
# ================================
async def expire_subscriptions_job(session_factory: SessionFactory = AsyncSessionLocal) -> int:
    logger.info("⌛ Running subscription expiry job...")

    async with session_factory() as session:
        try:
            lapsed = (
                await session.scalars(
                    select(Subscription)
                    .where(
                        Subscription.status == SubscriptionStatus.ACTIVE,
                        Subscription.end_date < get_now(),
                    )
                    .options(selectinload(Subscription.plan))
                )
            ).all()
            access = AccessService(session)
            for subscription in lapsed:
                await access.expire_subscription(subscription)
            await session.commit()
            logger.success(f"✔ Expired {len(lapsed)} subscriptions")
            return len(lapsed)
        except Exception as e:
            await session.rollback()
            logger.error(f"❌ Subscription expiry job error: {e}")
            return 0


# ================================
# START ALL JOBS
# ================================
def start_scheduler():
    now = datetime.now()

    try:
        scheduler.add_job(
            deactivate_stale_messages_job,
            trigger=IntervalTrigger(minutes=30),
            next_run_time=now,
            id="deactivate_stale_messages_job",
            replace_existing=True,
            max_instances=1,
        )
    except ConflictingIdError:
        logger.warning("⚠ deactivate_stale_messages_job existed")

    try:
        scheduler.add_job(
            expire_subscriptions_job,
            trigger=IntervalTrigger(hours=1),
            next_run_time=now,
            id="expire_subscriptions_job",
            replace_existing=True,
            max_instances=1,
        )
    except ConflictingIdError:
        logger.warning("⚠ expire_subscriptions_job existed")

    scheduler.start()
    logger.info("🔔 Scheduler started (stale messages + subscription expiry)")
