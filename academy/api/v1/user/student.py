from fastapi import APIRouter, Depends

from academy.core.deps import AuthorizationService
from academy.core.enum import Role
from academy.services.user.dashboard import DashboardService

router = APIRouter(tags=["User Activity"])


@router.get("/student/new-content")
async def get_new_content(
    authorization: AuthorizationService = Depends(AuthorizationService),
    dashboard_service: DashboardService = Depends(DashboardService),
):
    user = await authorization.get_current_user()
    # only students follow purchased courses
    if user.role != Role.USER:
        return {"new_content": []}
    return await dashboard_service.get_new_content_async(user)


@router.get("/user/points")
async def get_points(
    authorization: AuthorizationService = Depends(AuthorizationService),
    dashboard_service: DashboardService = Depends(DashboardService),
):
    user = await authorization.get_current_user()
    return await dashboard_service.get_points_async(user)
