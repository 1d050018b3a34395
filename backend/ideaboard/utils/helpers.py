import logging
import mimetypes
import os
import shutil
import uuid

from fastapi import UploadFile, HTTPException
from ideaboard.config import settings

logger = logging.getLogger(__name__)


def idea_upload_dir(idea_id: int) -> str:
    return os.path.join(settings.UPLOAD_DIR, str(idea_id))


def resolve_mime_type(file: UploadFile) -> str:
    guessed, _ = mimetypes.guess_type(file.filename or "")
    return (guessed or file.content_type or "application/octet-stream").lower()


def validate_mime_type(mime_type: str) -> None:
    if mime_type not in settings.ALLOWED_MIME_TYPES:
        raise HTTPException(status_code=400, detail=f"File type '{mime_type}' is not allowed")


async def save_upload(file: UploadFile, subfolder: str = "") -> dict:
    mime_type = resolve_mime_type(file)
    validate_mime_type(mime_type)
    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        limit_mb = settings.MAX_UPLOAD_SIZE // (1024 * 1024)
        raise HTTPException(status_code=400, detail=f"File exceeds {limit_mb} MB limit")

    folder = os.path.join(settings.UPLOAD_DIR, subfolder)
    os.makedirs(folder, exist_ok=True)

    _, ext = os.path.splitext(file.filename or "")
    filename = f"{uuid.uuid4().hex}{ext.lower()}"
    path = os.path.join(folder, filename)

    with open(path, "wb") as f:
        f.write(content)

    return {
        "filename": filename,
        "original_name": os.path.basename(file.filename or filename),
        "mime_type": mime_type,
        "size": len(content),
        "path": path,
    }


def remove_file(path: str) -> bool:
    try:
        os.remove(path)
        return True
    except FileNotFoundError:
        logger.warning("Stored file already missing: %s", path)
        return False


def remove_idea_uploads(idea_id: int) -> None:
    shutil.rmtree(idea_upload_dir(idea_id), ignore_errors=True)
