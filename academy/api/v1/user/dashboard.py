from fastapi import APIRouter, Depends

from academy.core.deps import AuthorizationService
from academy.core.enum import Role
from academy.services.user.dashboard import DashboardService

router = APIRouter(prefix="/dashboard", tags=["User Dashboard"])


@router.get("/messages")
async def get_dashboard_messages(
    authorization: AuthorizationService = Depends(AuthorizationService),
    dashboard_service: DashboardService = Depends(DashboardService),
):
    user = await authorization.require_role([Role.USER])
    return await dashboard_service.get_messages_async(user)


@router.get("/student")
async def get_student_dashboard(
    authorization: AuthorizationService = Depends(AuthorizationService),
    dashboard_service: DashboardService = Depends(DashboardService),
):
    user = await authorization.require_role([Role.USER])
    return await dashboard_service.get_student_stats_async(user)
