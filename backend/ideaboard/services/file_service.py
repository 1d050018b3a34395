"""File Service domain layer. Idea attachments stored on the local filesystem."""

import logging
import os
from typing import List

from fastapi import HTTPException, UploadFile
from sqlalchemy.orm import Session
from ideaboard.models.idea import FileAttachment
from ideaboard.models.user import User
from ideaboard.services.idea_service import get_idea_or_404
from ideaboard.utils.helpers import remove_file, save_upload
from ideaboard.utils.permissions import can_edit_idea

logger = logging.getLogger(__name__)


def _get_attachment(db: Session, idea_id: int, file_id: int) -> FileAttachment:
    attachment = db.query(FileAttachment).filter(FileAttachment.file_id == file_id).first()
    if not attachment or attachment.idea_id != idea_id:
        raise HTTPException(status_code=404, detail="File not found")
    return attachment


async def upload_file(db: Session, idea_id: int, file: UploadFile, current_user: User) -> FileAttachment:
    get_idea_or_404(db, idea_id)
    if not file.filename:
        raise HTTPException(status_code=400, detail="File name is required")

    stored = await save_upload(file, subfolder=str(idea_id))
    attachment = FileAttachment(
        idea_id=idea_id,
        filename=stored["filename"],
        original_name=stored["original_name"],
        mime_type=stored["mime_type"],
        file_size=stored["size"],
        file_path=stored["path"],
        uploaded_by=current_user.user_id,
    )
    db.add(attachment)
    db.commit()
    db.refresh(attachment)
    logger.info("File uploaded: idea=%s file=%s size=%s", idea_id, attachment.file_id, attachment.file_size)
    return attachment


def list_files(db: Session, idea_id: int) -> List[FileAttachment]:
    get_idea_or_404(db, idea_id)
    return (
        db.query(FileAttachment)
        .filter(FileAttachment.idea_id == idea_id)
        .order_by(FileAttachment.created_at.asc(), FileAttachment.file_id.asc())
        .all()
    )


def get_file(db: Session, idea_id: int, file_id: int) -> FileAttachment:
    attachment = _get_attachment(db, idea_id, file_id)
    if not os.path.isfile(attachment.file_path):
        logger.warning("Attachment %s missing on disk: %s", file_id, attachment.file_path)
        raise HTTPException(status_code=404, detail="File not found on disk")
    return attachment


def delete_file(db: Session, idea_id: int, file_id: int, current_user: User):
    idea = get_idea_or_404(db, idea_id)
    attachment = _get_attachment(db, idea_id, file_id)
    if not can_edit_idea(current_user, idea.author_id):
        raise HTTPException(status_code=403, detail="Only the idea author or an admin can delete files")

    path = attachment.file_path
    db.delete(attachment)
    db.commit()
    remove_file(path)
    logger.info("File %s deleted from idea %s by %s", file_id, idea_id, current_user.user_id)
