from fastapi import APIRouter, Depends, File, UploadFile

from academy.core.deps import AuthorizationService
from academy.services.shares.upload import UploadService

router = APIRouter(prefix="/upload", tags=["Uploads"])


@router.post("/{endpoint}")
async def create_upload(
    endpoint: str,
    file: UploadFile = File(...),
    upload: UploadService = Depends(UploadService),
    authorization_service: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization_service.get_current_user()
    return await upload.upload_file_async(endpoint, file, user.id)
