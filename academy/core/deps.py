# academy/core/deps.py
from typing import List, Optional

from fastapi import Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.enum import Role
from academy.core.security import SecurityService
from academy.db.models.database import User
from academy.db.session import get_session
from academy.libs.filters import FilterState
from academy.middleware.request_context import get_request


class AuthorizationService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        security: SecurityService = Depends(SecurityService),
    ):
        self.db = db
        self.security = security

    # ==============================
    # 🧩 CORE AUTH CHECKS
    # ==============================

    @staticmethod
    def _read_token() -> Optional[str]:
        """Token from the access_token cookie, else from a Bearer header."""
        request = get_request()
        token = request.cookies.get("access_token")
        if token:
            return token
        header = request.headers.get("authorization")
        if header and header.lower().startswith("bearer "):
            return header.split(" ", 1)[1].strip() or None
        return None

    async def _load_user(self, token: str) -> Optional[User]:
        try:
            claims = await self.security.read_claims(token)
        except ValueError:
            return None
        return await self.db.scalar(select(User).where(User.id == claims.user_id))

    async def get_current_user(self) -> User:
        """Current user from the access token; suspended accounts are rejected."""
        token = self._read_token()
        if not token:
            raise HTTPException(status_code=401, detail="Not authenticated")

        user = await self._load_user(token)
        if not user:
            raise HTTPException(status_code=401, detail="Invalid token")
        if user.is_suspended:
            raise HTTPException(status_code=403, detail="Account suspended")
        return user

    async def get_current_user_if_any(self) -> Optional[User]:
        token = self._read_token()
        if not token:
            return None
        user = await self._load_user(token)
        if not user or user.is_suspended:
            return None
        return user

    # ==============================
    # 🧩 ROLE-BASED ACCESS CONTROL
    # ==============================

    async def require_role(self, required_roles: Optional[List[Role]] = None) -> User:
        current_user = await self.get_current_user()

        if not required_roles:
            return current_user

        if current_user.role not in required_roles:
            raise HTTPException(status_code=403, detail="Permission denied")

        return current_user


def filter_params(
    search: str | None = Query(None, description="Name, email or phone"),
    curriculum: str | None = Query(None),
    level: str | None = Query(None),
    language: str | None = Query(None),
    grade: str | None = Query(None),
) -> FilterState:
    return FilterState(
        search=search or "",
        curriculum=curriculum or None,
        level=level or None,
        language=language or None,
        grade=grade or None,
    )
