"""Create every table, optionally seeding the first ADMIN account.

    python -m academy.db.models.init_db --admin-email admin@mail.com --admin-password secret123
"""

import argparse
import asyncio

from loguru import logger
from sqlalchemy import select

from academy.core.enum import Role
from academy.core.logging import setup_logging
from academy.core.security import SecurityService
from academy.core.settings import settings
from academy.db.models.database import User
from academy.db.session import AsyncSessionLocal, engine, init_db


async def seed_admin(email: str, password: str, full_name: str) -> None:
    async with AsyncSessionLocal() as session:
        if await session.scalar(select(User.id).where(User.email == email)):
            logger.warning(f"⚠ {email} already exists, skipping admin seed")
            return
        session.add(
            User(
                email=email,
                full_name=full_name,
                password=await SecurityService.hash_password(password),
                role=Role.ADMIN,
            )
        )
        await session.commit()
        logger.success(f"✅ Admin {email} created")


async def main(args: argparse.Namespace) -> None:
    setup_logging(settings.LOG_LEVEL)
    await init_db()
    logger.success("🎉 Database schema created")
    if args.admin_email and args.admin_password:
        await seed_admin(args.admin_email, args.admin_password, args.admin_name)
    await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create academy tables")
    parser.add_argument("--admin-email")
    parser.add_argument("--admin-password")
    parser.add_argument("--admin-name", default="Administrator")
    asyncio.run(main(parser.parse_args()))
