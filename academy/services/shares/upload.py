import os
import uuid
from dataclasses import dataclass
from typing import Any

import aiofiles
from fastapi import HTTPException, UploadFile
from loguru import logger

from academy.core.enum import UploadEndpoint
from academy.core.settings import settings

MB = 1024 * 1024
CHUNK_SIZE = 256 * 1024


@dataclass(frozen=True)
class EndpointRule:
    max_mb: int
    content_prefixes: tuple[str, ...]


IMAGE_ONLY = ("image/",)

ENDPOINT_RULES: dict[UploadEndpoint, EndpointRule] = {
    UploadEndpoint.COURSE_IMAGE: EndpointRule(4, IMAGE_ONLY),
    UploadEndpoint.HOMEWORK_IMAGE: EndpointRule(8, IMAGE_ONLY),
    UploadEndpoint.ACTIVITY_IMAGE: EndpointRule(8, IMAGE_ONLY),
    UploadEndpoint.CERTIFICATE_IMAGE: EndpointRule(8, IMAGE_ONLY),
    UploadEndpoint.TIMETABLE_IMAGE: EndpointRule(8, IMAGE_ONLY),
    UploadEndpoint.TRANSACTION_IMAGE: EndpointRule(4, IMAGE_ONLY),
    UploadEndpoint.COURSE_ATTACHMENT: EndpointRule(
        settings.MAX_UPLOAD_MB, ("text/", "image/", "video/", "audio/", "application/pdf")
    ),
}


def resolve_endpoint(tag: str) -> UploadEndpoint:
    try:
        return UploadEndpoint(tag)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown upload endpoint '{tag}'")


class UploadService:
    """Stores uploaded files under UPLOAD_DIR/<endpoint>/ and hands back their public URL."""

    def __init__(self):
        self.root = settings.UPLOAD_DIR
        self.base_url = settings.PUBLIC_UPLOAD_BASE_URL.rstrip("/")

    async def upload_file_async(self, tag: str, file: UploadFile, user_id: uuid.UUID) -> dict[str, Any]:
        endpoint = resolve_endpoint(tag)
        rule = ENDPOINT_RULES[endpoint]

        content_type = file.content_type or ""
        if not content_type.startswith(rule.content_prefixes):
            raise HTTPException(status_code=400, detail=f"File type '{content_type}' is not allowed for {endpoint.value}")

        ext = os.path.splitext(file.filename or "")[1].lower()
        stored_name = f"{uuid.uuid4()}{ext}"
        folder = os.path.join(self.root, endpoint.value)
        path = os.path.join(folder, stored_name)
        limit = rule.max_mb * MB

        try:
            os.makedirs(folder, exist_ok=True)
            written = 0
            async with aiofiles.open(path, "wb") as out:
                while chunk := await file.read(CHUNK_SIZE):
                    written += len(chunk)
                    if written > limit:
                        raise HTTPException(
                            status_code=400, detail=f"File exceeds the {rule.max_mb}MB limit"
                        )
                    await out.write(chunk)
        except HTTPException:
            if os.path.exists(path):
                os.remove(path)
            raise
        except Exception as e:
            if os.path.exists(path):
                os.remove(path)
            logger.exception("Upload failed")
            raise HTTPException(status_code=500, detail=f"Upload failed: {e}")

        logger.info(f"📤 {endpoint.value} upload by {user_id}: {stored_name} ({written} bytes)")
        return {
            "url": f"{self.base_url}/{endpoint.value}/{stored_name}",
            "name": file.filename or stored_name,
            "endpoint": endpoint.value,
        }
