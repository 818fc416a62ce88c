"""
Upload API Routes

Accepts image uploads and returns a placeholder descriptor. No file
storage backend is attached; the bytes are read, sized and dropped.
"""

import uuid
from pathlib import PurePath

from fastapi import APIRouter, Depends, File, UploadFile, status
from loguru import logger

from snafles.api.dependencies import Settings, get_app_settings, get_current_user
from snafles.api.schemas import ErrorResponse, UploadResponse
from snafles.errors import ValidationError
from snafles.storage.models import User


router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.post(
    "",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Unsupported or oversized file"}},
)
async def upload_image(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_app_settings),
):
    """Accept an image and describe where it would be stored."""
    allowed = {t.strip() for t in settings.allowed_image_types.split(",") if t.strip()}
    if file.content_type not in allowed:
        raise ValidationError(
            "Only image files are allowed",
            detail=f"Got {file.content_type}",
        )

    contents = await file.read()
    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    if len(contents) > max_bytes:
        raise ValidationError(
            "File too large",
            detail=f"Maximum size is {settings.max_upload_size_mb}MB",
        )

    filename = PurePath(file.filename or "upload").name
    stored_name = f"{uuid.uuid4().hex[:12]}-{filename}"
    logger.info(f"User {current_user.id} uploaded {filename} ({len(contents)} bytes)")

    return UploadResponse(
        message="File uploaded successfully",
        url=f"/uploads/{stored_name}",
        filename=stored_name,
        content_type=file.content_type,
        size=len(contents),
    )
