from fastapi import APIRouter, Body, Depends, Response, status

from academy.core.deps import AuthorizationService
from academy.schemas.auth.user import LoginUser, UserCreate
from academy.services.shares.auth import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", status_code=200)
async def login(
    res: Response,
    schema: LoginUser = Body(),
    auth_service: AuthService = Depends(AuthService),
):
    return await auth_service.login_async(schema, res)


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    schema: UserCreate = Body(),
    auth_service: AuthService = Depends(AuthService),
):
    return await auth_service.register_async(schema)


@router.post("/logout", status_code=status.HTTP_200_OK)
async def logout(
    res: Response,
    auth_service: AuthService = Depends(AuthService),
):
    return await auth_service.logout_async(res)


@router.get("/me")
async def me(
    auth_service: AuthService = Depends(AuthService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization.get_current_user()
    return await auth_service.me_async(user)
