import uuid
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

import bcrypt
import jwt
from starlette.concurrency import run_in_threadpool

from academy.core.settings import settings
from academy.libs.formats.datetime import now_tzinfo

# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True)
class TokenClaims:
    user_id: uuid.UUID
    role: str | None


def _hash_sync(plain: str) -> str:
    return bcrypt.hashpw(plain.encode("utf-8")[:BCRYPT_MAX_BYTES], bcrypt.gensalt()).decode("utf-8")


def _verify_sync(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8")[:BCRYPT_MAX_BYTES], hashed.encode("utf-8"))
    except ValueError:
        # malformed or empty stored hash
        return False


class SecurityService:
    """JWT access tokens and bcrypt password hashing; hashing runs off the event loop."""

    def __init__(self):
        self.secret_key = settings.SECRET_KEY
        self.algorithm = settings.ALGORITHM
        self.expires = timedelta(minutes=float(settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    # 🔐 JWT
    async def create_access_token(self, sub: str, role: str | None = None) -> str:
        issued = now_tzinfo()
        payload: dict[str, Any] = {"sub": sub, "iat": issued, "exp": issued + self.expires}
        if role:
            payload["role"] = role
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    async def decode_access_token(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise ValueError("Token expired")
        except jwt.InvalidTokenError:
            raise ValueError("Invalid token")

    async def read_claims(self, token: str) -> TokenClaims:
        """Decoded token with a parsed user id; any problem is a ValueError."""
        payload = await self.decode_access_token(token)
        sub = payload.get("sub")
        if not sub:
            raise ValueError("Token has no subject")
        return TokenClaims(user_id=uuid.UUID(str(sub)), role=payload.get("role"))

    # 🔑 PASSWORD
    @staticmethod
    async def hash_password(plain: str) -> str:
        return await run_in_threadpool(_hash_sync, plain)

    @staticmethod
    async def verify_password(plain: str, hashed: str) -> bool:
        if not hashed:
            return False
        return await run_in_threadpool(_verify_sync, plain, hashed)
