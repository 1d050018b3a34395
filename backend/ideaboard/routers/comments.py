"""Comments API router: deletion and emoji reactions."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from ideaboard.database import get_db
from ideaboard.schemas.comment import CommentOut, ReactionCreate
from ideaboard.services import comment_service
from ideaboard.middleware.auth_middleware import get_current_user
from ideaboard.models.user import User

router = APIRouter(prefix="/api/comments", tags=["comments"])


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(comment_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    comment_service.delete_comment(db, comment_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{comment_id}/reactions", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
def add_reaction(
    comment_id: int,
    data: ReactionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return comment_service.add_reaction(db, comment_id, data.emoji, current_user)


@router.delete("/{comment_id}/reactions/{emoji}", response_model=CommentOut)
def remove_reaction(
    comment_id: int,
    emoji: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return comment_service.remove_reaction(db, comment_id, emoji, current_user)
