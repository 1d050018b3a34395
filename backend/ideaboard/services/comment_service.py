"""Comment Service domain layer. Comments on ideas and emoji reactions on comments."""

import logging
from collections import OrderedDict
from typing import List

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from ideaboard.models.comment import Comment, CommentReaction
from ideaboard.models.idea import Idea
from ideaboard.models.user import User
from ideaboard.schemas.user import UserSummary
from ideaboard.services import gamification_service, notification_service
from ideaboard.services.idea_service import get_idea_or_404
from ideaboard.utils.permissions import is_admin

logger = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = 200


def _get_comment(db: Session, comment_id: int) -> Comment:
    comment = db.query(Comment).filter(Comment.comment_id == comment_id).first()
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")
    return comment


def _reaction_summary(comment: Comment) -> List[dict]:
    grouped: "OrderedDict[str, list[int]]" = OrderedDict()
    for reaction in sorted(comment.reactions, key=lambda r: r.reaction_id):
        grouped.setdefault(reaction.emoji, []).append(reaction.user_id)
    return [{"emoji": emoji, "count": len(users), "user_ids": users} for emoji, users in grouped.items()]


def serialize_comment(comment: Comment) -> dict:
    return {
        "comment_id": comment.comment_id,
        "idea_id": comment.idea_id,
        "author": UserSummary.model_validate(comment.author),
        "content": comment.content,
        "reaction_count": comment.reaction_count,
        "reactions": _reaction_summary(comment),
        "created_at": comment.created_at,
    }


def list_comments(db: Session, idea_id: int) -> List[dict]:
    get_idea_or_404(db, idea_id)
    rows = (
        db.query(Comment)
        .filter(Comment.idea_id == idea_id)
        .order_by(Comment.created_at.asc(), Comment.comment_id.asc())
        .all()
    )
    return [serialize_comment(c) for c in rows]


def create_comment(db: Session, idea_id: int, content: str, current_user: User) -> dict:
    text = (content or "").strip()
    if not text:
        raise HTTPException(status_code=400, detail="Comment content is required")
    if len(text) > MAX_CONTENT_LENGTH:
        raise HTTPException(status_code=400, detail=f"Comment must be at most {MAX_CONTENT_LENGTH} characters")
    idea = get_idea_or_404(db, idea_id)

    comment = Comment(idea_id=idea_id, author_id=current_user.user_id, content=text, reaction_count=0)
    db.add(comment)
    db.flush()
    db.query(Idea).filter(Idea.idea_id == idea_id).update(
        {"comment_count": Idea.comment_count + 1, "updated_at": Idea.updated_at}, synchronize_session=False
    )
    gamification_service.award_xp(db, current_user.user_id, gamification_service.XP_FOR_COMMENT)
    if idea.author_id != current_user.user_id:
        notification_service.notify_comment(db, idea, comment, current_user)
    db.commit()
    db.refresh(comment)
    return serialize_comment(comment)


def delete_comment(db: Session, comment_id: int, current_user: User):
    comment = _get_comment(db, comment_id)
    if comment.author_id != current_user.user_id and not is_admin(current_user):
        raise HTTPException(status_code=403, detail="Only the author or an admin can delete this comment")

    idea_id = comment.idea_id
    db.delete(comment)
    db.flush()
    db.query(Idea).filter(Idea.idea_id == idea_id, Idea.comment_count > 0).update(
        {"comment_count": Idea.comment_count - 1, "updated_at": Idea.updated_at}, synchronize_session=False
    )
    db.commit()
    logger.info("Comment %s deleted by %s", comment_id, current_user.user_id)


def add_reaction(db: Session, comment_id: int, emoji: str, current_user: User) -> dict:
    symbol = (emoji or "").strip()
    if not symbol:
        raise HTTPException(status_code=400, detail="Emoji is required")
    comment = _get_comment(db, comment_id)
    existing = (
        db.query(CommentReaction.reaction_id)
        .filter(
            CommentReaction.comment_id == comment_id,
            CommentReaction.user_id == current_user.user_id,
            CommentReaction.emoji == symbol,
        )
        .first()
    )
    if existing:
        raise HTTPException(status_code=409, detail="You already reacted with this emoji")

    db.add(CommentReaction(comment_id=comment_id, user_id=current_user.user_id, emoji=symbol))
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="You already reacted with this emoji")
    db.query(Comment).filter(Comment.comment_id == comment_id).update(
        {"reaction_count": Comment.reaction_count + 1}, synchronize_session=False
    )
    if comment.author_id != current_user.user_id:
        notification_service.notify_reaction(db, comment, symbol, current_user)
    db.commit()
    db.refresh(comment)
    return serialize_comment(comment)


def remove_reaction(db: Session, comment_id: int, emoji: str, current_user: User) -> dict:
    comment = _get_comment(db, comment_id)
    reaction = (
        db.query(CommentReaction)
        .filter(
            CommentReaction.comment_id == comment_id,
            CommentReaction.user_id == current_user.user_id,
            CommentReaction.emoji == (emoji or "").strip(),
        )
        .first()
    )
    if not reaction:
        raise HTTPException(status_code=404, detail="Reaction not found")

    db.delete(reaction)
    db.flush()
    db.query(Comment).filter(Comment.comment_id == comment_id, Comment.reaction_count > 0).update(
        {"reaction_count": Comment.reaction_count - 1}, synchronize_session=False
    )
    db.commit()
    db.refresh(comment)
    return serialize_comment(comment)
