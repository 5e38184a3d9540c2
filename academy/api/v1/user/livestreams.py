import uuid

from fastapi import APIRouter, Depends

from academy.core.deps import AuthorizationService
from academy.services.user.livestreams import LiveStreamService

router = APIRouter(prefix="/courses/{course_id}/livestreams", tags=["User Live Streams"])


@router.get("/{stream_id}")
async def get_stream(
    course_id: uuid.UUID,
    stream_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    stream_service: LiveStreamService = Depends(LiveStreamService),
):
    user = await authorization.get_current_user()
    return await stream_service.get_stream_async(course_id, stream_id, user)


@router.post("/{stream_id}/attend")
async def attend_stream(
    course_id: uuid.UUID,
    stream_id: uuid.UUID,
    authorization: AuthorizationService = Depends(AuthorizationService),
    stream_service: LiveStreamService = Depends(LiveStreamService),
):
    user = await authorization.get_current_user()
    return await stream_service.attend_async(course_id, stream_id, user)
