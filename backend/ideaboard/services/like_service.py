"""Like Service domain layer. Weekly like quota and like/unlike flows."""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from ideaboard.models.idea import Idea, Like
from ideaboard.models.user import User
from ideaboard.services import gamification_service, notification_service
from ideaboard.services.idea_service import get_idea_or_404

logger = logging.getLogger(__name__)

MAX_WEEKLY_LIKES = 3


def quota_window_start(now: Optional[datetime] = None) -> datetime:
    """Most recent Sunday 00:00 local time (today when today is Sunday)."""
    now = now or datetime.now()
    # Monday=0 ... Sunday=6
    days_since_sunday = (now.weekday() + 1) % 7
    start = now - timedelta(days=days_since_sunday)
    return start.replace(hour=0, minute=0, second=0, microsecond=0)


def weekly_likes_used(db: Session, user_id: int, now: Optional[datetime] = None) -> int:
    return (
        db.query(Like)
        .filter(Like.user_id == user_id, Like.created_at >= quota_window_start(now))
        .count()
    )


def remaining_likes(db: Session, user_id: int, now: Optional[datetime] = None) -> int:
    return max(0, MAX_WEEKLY_LIKES - weekly_likes_used(db, user_id, now))


def like_status(db: Session, current_user: User) -> dict:
    used = weekly_likes_used(db, current_user.user_id)
    return {
        "remaining_likes": max(0, MAX_WEEKLY_LIKES - used),
        "weekly_likes_used": used,
        "max_weekly_likes": MAX_WEEKLY_LIKES,
    }


def has_liked(db: Session, user_id: int, idea_id: int) -> bool:
    return (
        db.query(Like.like_id).filter(Like.user_id == user_id, Like.idea_id == idea_id).first()
        is not None
    )


def _result(db: Session, idea_id: int, user_id: int, liked: bool) -> dict:
    like_count = db.query(Idea.like_count).filter(Idea.idea_id == idea_id).scalar() or 0
    return {
        "idea_id": idea_id,
        "like_count": like_count,
        "liked": liked,
        "remaining_likes": remaining_likes(db, user_id),
    }


def like_idea(db: Session, idea_id: int, current_user: User) -> dict:
    idea = get_idea_or_404(db, idea_id)
    if remaining_likes(db, current_user.user_id) <= 0:
        raise HTTPException(status_code=400, detail="No likes remaining this week. Likes reset every Sunday.")
    if has_liked(db, current_user.user_id, idea_id):
        raise HTTPException(status_code=409, detail="You have already liked this idea")
    if idea.author_id == current_user.user_id:
        raise HTTPException(status_code=400, detail="You cannot like your own idea")

    db.add(Like(user_id=current_user.user_id, idea_id=idea_id, created_at=datetime.now()))
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="You have already liked this idea")

    db.query(Idea).filter(Idea.idea_id == idea_id).update(
        {"like_count": Idea.like_count + 1, "updated_at": Idea.updated_at}, synchronize_session=False
    )
    gamification_service.award_xp(db, idea.author_id, gamification_service.XP_FOR_LIKE_RECEIVED)
    notification_service.notify_like(db, idea, current_user)
    db.commit()
    logger.info("User %s liked idea %s", current_user.user_id, idea_id)
    return _result(db, idea_id, current_user.user_id, liked=True)


def unlike_idea(db: Session, idea_id: int, current_user: User) -> dict:
    like = (
        db.query(Like)
        .filter(Like.user_id == current_user.user_id, Like.idea_id == idea_id)
        .first()
    )
    if not like:
        raise HTTPException(status_code=404, detail="Like not found")

    db.delete(like)
    db.flush()
    db.query(Idea).filter(Idea.idea_id == idea_id, Idea.like_count > 0).update(
        {"like_count": Idea.like_count - 1, "updated_at": Idea.updated_at}, synchronize_session=False
    )
    db.commit()
    logger.info("User %s unliked idea %s", current_user.user_id, idea_id)
    return _result(db, idea_id, current_user.user_id, liked=False)
