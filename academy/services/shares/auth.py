from typing import Any

from fastapi import Depends, HTTPException, Response, status
from loguru import logger
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.enum import Role
from academy.core.security import SecurityService
from academy.core.settings import settings
from academy.db.models.database import User
from academy.db.session import get_session
from academy.libs.curriculum import is_valid_selection
from academy.schemas.auth.user import LoginUser, TeacherCreateAccount, UserCreate, UserOut


class AuthService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        security: SecurityService = Depends(SecurityService),
    ):
        self.db = db
        self.security = security

    async def login_async(self, schema: LoginUser, res: Response) -> dict[str, Any]:
        user = await self.db.scalar(select(User).where(User.email == schema.email))

        # 1️⃣ unknown user or wrong password
        if not user or not await self.security.verify_password(schema.password, user.password or ""):
            raise HTTPException(
                status_code=401,
                detail={
                    "error_code": "INVALID_CREDENTIALS",
                    "message": "Invalid email or password",
                },
            )

        # 2️⃣ suspended account
        if user.is_suspended:
            raise HTTPException(
                status_code=403,
                detail={
                    "error_code": "ACCOUNT_SUSPENDED",
                    "message": "Account suspended",
                },
            )

        # 3️⃣ token + cookie
        token = await self.security.create_access_token(str(user.id), user.role.value)
        res.set_cookie(
            key="access_token",
            value=token,
            httponly=True,
            secure=False,
            samesite="lax",
            max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            path="/",
        )
        logger.info(f"🔑 {user.email} logged in")
        return {"message": "Login successful", "access_token": token, "token_type": "bearer"}

    async def _create_student(self, schema: UserCreate) -> User:
        conditions = [User.email == schema.email]
        if schema.phone_number:
            conditions.append(User.phone_number == schema.phone_number)
        existing_id = (await self.db.scalars(select(User.id).where(or_(*conditions)))).first()
        if existing_id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email or phone number already registered",
            )
        if not is_valid_selection(schema.curriculum, schema.level, schema.language, schema.grade):
            raise HTTPException(status_code=400, detail="Invalid curriculum selection")

        new_user = User(
            email=schema.email,
            full_name=schema.full_name,
            password=await self.security.hash_password(schema.password),
            role=Role.USER,
            phone_number=schema.phone_number,
            parent_phone_number=schema.parent_phone_number or None,
            curriculum=schema.curriculum,
            curriculum_type=schema.curriculum_type,
            level=schema.level,
            language=schema.language,
            grade=schema.grade,
        )
        self.db.add(new_user)
        await self.db.commit()
        await self.db.refresh(new_user)
        return new_user

    async def register_async(self, schema: UserCreate) -> UserOut:
        try:
            new_user = await self._create_student(schema)
            logger.success(f"✔ Registered {new_user.email}")
            return UserOut.model_validate(new_user)
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Register failed")
            raise HTTPException(status_code=500, detail=f"Register failed: {e}")

    async def create_account_for_student_async(self, schema: TeacherCreateAccount, teacher: User) -> dict[str, Any]:
        """A teacher opens a student account on the student's behalf."""
        try:
            if schema.password != schema.confirm_password:
                raise HTTPException(status_code=400, detail="Passwords do not match")
            parent_phone = (schema.parent_phone_number or "").strip()
            if parent_phone and parent_phone == schema.phone_number.strip():
                raise HTTPException(
                    status_code=400,
                    detail="Parent phone number cannot be the same as student phone number",
                )
            new_user = await self._create_student(schema)
            logger.success(f"✔ {teacher.email} created student account {new_user.email}")
            return {
                "success": True,
                "user": {
                    "id": new_user.id,
                    "full_name": new_user.full_name,
                    "phone_number": new_user.phone_number,
                    "role": new_user.role,
                },
            }
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception("Create student account failed")
            raise HTTPException(status_code=500, detail=f"Create student account failed: {e}")

    async def logout_async(self, res: Response) -> dict[str, str]:
        res.delete_cookie(
            key="access_token",
            httponly=True,
            secure=False,
            samesite="lax",
            path="/",
        )
        return {"message": "Logout done"}

    async def me_async(self, user: User) -> UserOut:
        return UserOut.model_validate(user)
