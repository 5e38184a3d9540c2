"""One query behind every paginated user list (admin users, teacher students, export)."""

from typing import Sequence

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.enum import Role
from academy.db.models.database import Purchase, User, UserProgress
from academy.libs.filters import FilterState, classification_clauses

USER_COLUMNS = {
    "curriculum": User.curriculum,
    "level": User.level,
    "language": User.language,
    "grade": User.grade,
}


def build_user_query(filters: FilterState, roles: Sequence[Role] | None = None) -> Select:
    purchases = (
        select(func.count(Purchase.id)).where(Purchase.user_id == User.id).correlate(User).scalar_subquery()
    )
    completed = (
        select(func.count(UserProgress.id))
        .where(UserProgress.user_id == User.id, UserProgress.is_completed.is_(True))
        .correlate(User)
        .scalar_subquery()
    )
    stmt = select(User, purchases.label("purchases_count"), completed.label("completed_chapters"))

    if roles:
        stmt = stmt.where(User.role.in_(list(roles)))

    term = filters.search.strip()
    if term:
        stmt = stmt.where(
            or_(
                User.full_name.ilike(f"%{term}%"),
                User.email.ilike(f"%{term}%"),
                User.phone_number.contains(term),
            )
        )
    return stmt.where(*classification_clauses(filters, USER_COLUMNS))


async def fetch_user_page(
    db: AsyncSession,
    filters: FilterState,
    page: int,
    size: int,
    roles: Sequence[Role] | None = None,
) -> tuple[list[tuple[User, int, int]], int]:
    stmt = build_user_query(filters, roles)
    total_items = await db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    rows = (
        await db.execute(stmt.order_by(User.created_at.desc()).offset((page - 1) * size).limit(size))
    ).all()
    return [(user, purchases or 0, completed or 0) for user, purchases, completed in rows], total_items

