"""Ideas API router. Ideas plus their likes, comments, checklist and attachments."""

from typing import List

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session
from ideaboard.database import get_db
from ideaboard.schemas.comment import CommentCreate, CommentOut
from ideaboard.schemas.idea import (
    ChecklistItemCreate,
    ChecklistItemOut,
    ChecklistItemUpdate,
    FileAttachmentOut,
    IdeaCreate,
    IdeaDetailOut,
    IdeaOut,
    IdeaPage,
    IdeaStatusUpdate,
    IdeaUpdate,
    LikeResultOut,
    TagCountOut,
)
from ideaboard.services import checklist_service, comment_service, file_service, idea_service, like_service
from ideaboard.middleware.auth_middleware import get_current_user
from ideaboard.models.user import User

router = APIRouter(prefix="/api/ideas", tags=["ideas"])


@router.get("", response_model=IdeaPage)
def list_ideas(
    category: str | None = None,
    status: str | None = None,
    author_id: int | None = None,
    search: str | None = Query(None, max_length=100),
    page: int = Query(0, ge=0),
    size: int = Query(idea_service.DEFAULT_PAGE_SIZE, ge=1, le=idea_service.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return idea_service.list_ideas(
        db, current_user, category=category, status=status, author_id=author_id, search=search, page=page, size=size
    )


@router.get("/categories", response_model=List[str])
def list_categories(db: Session = Depends(get_db), _current_user: User = Depends(get_current_user)):
    return idea_service.list_categories(db)


@router.get("/tags/popular", response_model=List[TagCountOut])
def popular_tags(
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
):
    return idea_service.popular_tags(db, limit)


@router.get("/top", response_model=List[IdeaOut])
def top_ideas(
    limit: int = Query(3, ge=1, le=50),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return idea_service.serialize_many(db, idea_service.top_ideas(db, limit), current_user)


@router.post("", response_model=IdeaDetailOut, status_code=status.HTTP_201_CREATED)
def create_idea(data: IdeaCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return idea_service.create_idea(db, data, current_user)


@router.get("/{idea_id}", response_model=IdeaDetailOut)
def get_idea(idea_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return idea_service.get_idea(db, idea_id, current_user)


@router.put("/{idea_id}", response_model=IdeaDetailOut)
def update_idea(
    idea_id: int,
    data: IdeaUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return idea_service.update_idea(db, idea_id, data, current_user)


@router.put("/{idea_id}/status", response_model=IdeaDetailOut)
def update_status(
    idea_id: int,
    data: IdeaStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return idea_service.update_status(db, idea_id, data.status, current_user)


@router.delete("/{idea_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_idea(idea_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    idea_service.delete_idea(db, idea_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Likes

@router.post("/{idea_id}/like", response_model=LikeResultOut)
def like_idea(idea_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return like_service.like_idea(db, idea_id, current_user)


@router.delete("/{idea_id}/like", response_model=LikeResultOut)
def unlike_idea(idea_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return like_service.unlike_idea(db, idea_id, current_user)


# Comments

@router.get("/{idea_id}/comments", response_model=List[CommentOut])
def list_comments(idea_id: int, db: Session = Depends(get_db), _current_user: User = Depends(get_current_user)):
    return comment_service.list_comments(db, idea_id)


@router.post("/{idea_id}/comments", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
def create_comment(
    idea_id: int,
    data: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return comment_service.create_comment(db, idea_id, data.content, current_user)


# Checklist

@router.get("/{idea_id}/checklist", response_model=List[ChecklistItemOut])
def list_checklist(idea_id: int, db: Session = Depends(get_db), _current_user: User = Depends(get_current_user)):
    return checklist_service.list_items(db, idea_id)


@router.post("/{idea_id}/checklist", response_model=ChecklistItemOut, status_code=status.HTTP_201_CREATED)
def create_checklist_item(
    idea_id: int,
    data: ChecklistItemCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return checklist_service.create_item(db, idea_id, data.title, current_user)


@router.put("/{idea_id}/checklist/{item_id}/toggle", response_model=ChecklistItemOut)
def toggle_checklist_item(
    idea_id: int,
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return checklist_service.toggle_item(db, idea_id, item_id, current_user)


@router.put("/{idea_id}/checklist/{item_id}", response_model=ChecklistItemOut)
def update_checklist_item(
    idea_id: int,
    item_id: int,
    data: ChecklistItemUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return checklist_service.update_item(
        db, idea_id, item_id, current_user, title=data.title, is_completed=data.is_completed
    )


@router.delete("/{idea_id}/checklist/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_checklist_item(
    idea_id: int,
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    checklist_service.delete_item(db, idea_id, item_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Files

@router.get("/{idea_id}/files", response_model=List[FileAttachmentOut])
def list_files(idea_id: int, db: Session = Depends(get_db), _current_user: User = Depends(get_current_user)):
    return file_service.list_files(db, idea_id)


@router.post("/{idea_id}/files", response_model=FileAttachmentOut, status_code=status.HTTP_201_CREATED)
async def upload_file(
    idea_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await file_service.upload_file(db, idea_id, file, current_user)


@router.get("/{idea_id}/files/{file_id}")
def download_file(
    idea_id: int,
    file_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
):
    attachment = file_service.get_file(db, idea_id, file_id)
    return FileResponse(attachment.file_path, media_type=attachment.mime_type, filename=attachment.original_name)


@router.delete("/{idea_id}/files/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_file(
    idea_id: int,
    file_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    file_service.delete_file(db, idea_id, file_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
