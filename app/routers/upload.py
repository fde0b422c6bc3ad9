# =============================================================================
# app/routers/upload.py - File Upload
# =============================================================================
# Stores uploaded images in the static directory so the static stage serves
# them back at /<filename>. Multipart parsing is done by FastAPI
# (python-multipart) before the endpoint runs.
# =============================================================================

import logging
import re
import secrets
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, File, Request, UploadFile, status
from pydantic import BaseModel

from app.auth import AuthUser, get_current_user
from app.exceptions import EmptyFileError, FileTooLargeError, InvalidFileTypeError

logger = logging.getLogger(__name__)

# Read uploads in 1 MB chunks so oversized files are rejected early
CHUNK_SIZE = 1024 * 1024

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class UploadResponse(BaseModel):
    filename: str
    url: str
    size_bytes: int
    content_type: str | None = None


def safe_filename(filename: str) -> str:
    """
    Reduce a client-supplied filename to a safe basename.

    Example: "../../My Photo (1).PNG" -> "My_Photo_1_.PNG"
    """
    name = Path(filename.replace("\\", "/")).name
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name or "upload"


def build_router(storage_dir: Path) -> APIRouter:
    """
    Build the upload router.

    Args:
        storage_dir: Directory uploaded files are written to
    """
    router = APIRouter()
    storage_dir = Path(storage_dir)

    @router.post("", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
    async def upload_file(
        request: Request,
        file: Annotated[UploadFile, File(description="Image to upload")],
        user: AuthUser = Depends(get_current_user),
    ) -> UploadResponse:
        """
        Upload an image.

        The stored name gets a random prefix so uploads never overwrite
        each other.

        Raises:
            400: Disallowed extension or empty file
            413: File larger than MAX_UPLOAD_SIZE_MB
        """
        settings = request.app.state.context.settings

        original_name = file.filename or "upload"
        extension = Path(original_name).suffix.lower()
        if extension not in settings.allowed_extensions_list:
            raise InvalidFileTypeError(original_name, settings.allowed_extensions_list)

        content = bytearray()
        while chunk := await file.read(CHUNK_SIZE):
            content.extend(chunk)
            if len(content) > settings.max_upload_size_bytes:
                raise FileTooLargeError(len(content) / (1024 * 1024), settings.MAX_UPLOAD_SIZE_MB)

        if not content:
            raise EmptyFileError(original_name)

        stored_name = f"{secrets.token_hex(8)}-{safe_filename(original_name)}"
        storage_dir.mkdir(parents=True, exist_ok=True)
        (storage_dir / stored_name).write_bytes(bytes(content))

        logger.info(f"User {user.id} uploaded {stored_name} ({len(content)} bytes)")
        return UploadResponse(
            filename=stored_name,
            url=f"/{stored_name}",
            size_bytes=len(content),
            content_type=file.content_type,
        )

    return router
