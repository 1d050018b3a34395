"""Idea Service domain layer. Idea lifecycle, listing and status workflow."""

import logging
import math
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from ideaboard.models.idea import Idea, IdeaTag, Like
from ideaboard.models.user import User
from ideaboard.schemas.idea import IdeaCreate, IdeaUpdate
from ideaboard.schemas.user import UserSummary
from ideaboard.services import audit_service, gamification_service, group_service, notification_service
from ideaboard.utils.helpers import remove_idea_uploads
from ideaboard.utils.permissions import can_change_status, can_delete_idea, can_edit_idea

logger = logging.getLogger(__name__)

CONCEPT = "CONCEPT"
IN_PROGRESS = "IN_PROGRESS"
COMPLETED = "COMPLETED"
STATUSES = (CONCEPT, IN_PROGRESS, COMPLETED)

DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 100
MAX_TAG_LENGTH = 50


def get_idea_or_404(db: Session, idea_id: int) -> Idea:
    idea = db.query(Idea).filter(Idea.idea_id == idea_id).first()
    if not idea:
        raise HTTPException(status_code=404, detail="Idea not found")
    return idea


def _require_text(value: Optional[str], field: str, max_length: Optional[int] = None) -> str:
    text = (value or "").strip()
    if not text:
        raise HTTPException(status_code=400, detail=f"{field} is required")
    if max_length and len(text) > max_length:
        raise HTTPException(status_code=400, detail=f"{field} must be at most {max_length} characters")
    return text


def _normalize_tags(values: Optional[List[str]]) -> List[str]:
    tags = []
    seen = set()
    for raw in values or []:
        tag = str(raw or "").strip()[:MAX_TAG_LENGTH]
        if not tag or tag.lower() in seen:
            continue
        seen.add(tag.lower())
        tags.append(tag)
    return tags


def _replace_tags(db: Session, idea: Idea, tags: List[str]):
    idea.tags.clear()
    db.flush()
    for position, tag in enumerate(tags):
        idea.tags.append(IdeaTag(tag=tag, position=position))


def _snapshot(idea: Idea) -> dict:
    return {
        "title": idea.title,
        "description": idea.description,
        "category": idea.category,
        "status": idea.status,
        "progress_percentage": idea.progress_percentage,
        "tags": idea.tag_names,
    }


def liked_idea_ids(db: Session, user_id: int, idea_ids: List[int]) -> set[int]:
    if not idea_ids:
        return set()
    rows = db.query(Like.idea_id).filter(Like.user_id == user_id, Like.idea_id.in_(idea_ids)).all()
    return {int(row[0]) for row in rows}


def serialize_idea(idea: Idea, liked: bool = False) -> dict:
    return {
        "idea_id": idea.idea_id,
        "title": idea.title,
        "description": idea.description,
        "category": idea.category,
        "status": idea.status,
        "progress_percentage": idea.progress_percentage,
        "like_count": idea.like_count,
        "comment_count": idea.comment_count,
        "view_count": idea.view_count,
        "author": UserSummary.model_validate(idea.author),
        "tags": idea.tag_names,
        "is_liked_by_current_user": liked,
        "created_at": idea.created_at,
        "updated_at": idea.updated_at,
    }


def serialize_idea_detail(idea: Idea, liked: bool = False) -> dict:
    data = serialize_idea(idea, liked)
    data["checklist_items"] = list(idea.checklist_items)
    data["attachments"] = list(idea.attachments)
    data["group_id"] = idea.group.group_id if idea.group else None
    return data


def serialize_many(db: Session, ideas: List[Idea], current_user: Optional[User]) -> List[dict]:
    liked = liked_idea_ids(db, current_user.user_id, [i.idea_id for i in ideas]) if current_user else set()
    return [serialize_idea(i, i.idea_id in liked) for i in ideas]


def _detail_for(db: Session, idea: Idea, current_user: User) -> dict:
    liked = idea.idea_id in liked_idea_ids(db, current_user.user_id, [idea.idea_id])
    return serialize_idea_detail(idea, liked)


def list_ideas(
    db: Session,
    current_user: User,
    category: Optional[str] = None,
    status: Optional[str] = None,
    author_id: Optional[int] = None,
    search: Optional[str] = None,
    page: int = 0,
    size: int = DEFAULT_PAGE_SIZE,
) -> dict:
    page = max(page, 0)
    size = min(max(size, 1), MAX_PAGE_SIZE)

    q = db.query(Idea)
    if category:
        q = q.filter(Idea.category == category)
    if status:
        q = q.filter(Idea.status == status.upper())
    if author_id is not None:
        q = q.filter(Idea.author_id == author_id)
    if search and search.strip():
        pattern = f"%{search.strip().lower()}%"
        q = q.filter(or_(func.lower(Idea.title).like(pattern), func.lower(Idea.description).like(pattern)))

    total = q.count()
    rows = (
        q.order_by(Idea.created_at.desc(), Idea.idea_id.desc())
        .offset(page * size)
        .limit(size)
        .all()
    )
    total_pages = math.ceil(total / size) if total else 0
    return {
        "content": serialize_many(db, rows, current_user),
        "total_elements": total,
        "total_pages": total_pages,
        "size": size,
        "number": page,
        "first": page == 0,
        "last": page >= total_pages - 1,
    }


def get_idea(db: Session, idea_id: int, current_user: User) -> dict:
    idea = get_idea_or_404(db, idea_id)
    db.query(Idea).filter(Idea.idea_id == idea_id).update(
        {"view_count": Idea.view_count + 1, "updated_at": Idea.updated_at}, synchronize_session=False
    )
    db.commit()
    db.refresh(idea)
    return _detail_for(db, idea, current_user)


def create_idea(db: Session, data: IdeaCreate, current_user: User) -> dict:
    title = _require_text(data.title, "Title", 200)
    description = _require_text(data.description, "Description")
    category = _require_text(data.category, "Category", 100)

    idea = Idea(
        title=title,
        description=description,
        category=category,
        author_id=current_user.user_id,
        status=CONCEPT,
        progress_percentage=0,
        like_count=0,
        comment_count=0,
        view_count=0,
    )
    for position, tag in enumerate(_normalize_tags(data.tags)):
        idea.tags.append(IdeaTag(tag=tag, position=position))
    db.add(idea)
    db.flush()

    group_service.create_group_for_idea(db, idea, current_user)
    gamification_service.award_xp(db, current_user.user_id, gamification_service.XP_FOR_IDEA)
    audit_service.log(db, current_user.user_id, audit_service.CREATE, "Idea", idea.idea_id, new_value=_snapshot(idea))
    db.commit()
    db.refresh(idea)
    logger.info("Idea created: id=%s author=%s", idea.idea_id, current_user.user_id)
    return _detail_for(db, idea, current_user)


def update_idea(db: Session, idea_id: int, data: IdeaUpdate, current_user: User) -> dict:
    idea = get_idea_or_404(db, idea_id)
    if not can_edit_idea(current_user, idea.author_id):
        raise HTTPException(status_code=403, detail="Only the author or an admin can edit this idea")

    before = _snapshot(idea)
    if data.title is not None:
        idea.title = _require_text(data.title, "Title", 200)
    if data.description is not None:
        idea.description = _require_text(data.description, "Description")
    if data.category is not None:
        idea.category = _require_text(data.category, "Category", 100)
    if data.tags is not None:
        _replace_tags(db, idea, _normalize_tags(data.tags))
    db.flush()

    audit_service.log(db, current_user.user_id, audit_service.UPDATE, "Idea", idea.idea_id, before, _snapshot(idea))
    db.commit()
    db.refresh(idea)
    return _detail_for(db, idea, current_user)


def update_status(db: Session, idea_id: int, new_status: str, current_user: User) -> dict:
    if not can_change_status(current_user):
        raise HTTPException(status_code=403, detail="Only project managers or admins can change idea status")
    status = (new_status or "").strip().upper()
    if status not in STATUSES:
        raise HTTPException(status_code=400, detail=f"Invalid status: {new_status}")
    idea = get_idea_or_404(db, idea_id)

    old_status = idea.status
    if old_status == status:
        return _detail_for(db, idea, current_user)

    idea.status = status
    if status == COMPLETED:
        idea.progress_percentage = 100
    elif status == CONCEPT:
        idea.progress_percentage = 0
    db.flush()

    if status == COMPLETED:
        gamification_service.award_xp(db, idea.author_id, gamification_service.XP_FOR_COMPLETED)
    notification_service.notify_status_change(db, idea, old_status, status, current_user)
    audit_service.log(
        db,
        current_user.user_id,
        audit_service.STATUS_CHANGE,
        "Idea",
        idea.idea_id,
        old_value={"status": old_status},
        new_value={"status": status},
    )
    db.commit()
    db.refresh(idea)
    logger.info("Idea %s status %s -> %s by %s", idea_id, old_status, status, current_user.user_id)
    return _detail_for(db, idea, current_user)


def delete_idea(db: Session, idea_id: int, current_user: User):
    if not can_delete_idea(current_user):
        raise HTTPException(status_code=403, detail="Only admins can delete ideas")
    idea = get_idea_or_404(db, idea_id)

    audit_service.log(db, current_user.user_id, audit_service.DELETE, "Idea", idea.idea_id, old_value=_snapshot(idea))
    db.delete(idea)
    db.commit()
    remove_idea_uploads(idea_id)
    logger.info("Idea %s deleted by %s", idea_id, current_user.user_id)


def list_categories(db: Session) -> List[str]:
    rows = db.query(Idea.category).distinct().order_by(Idea.category.asc()).all()
    return [row[0] for row in rows if row[0]]


def popular_tags(db: Session, limit: int = 20) -> List[dict]:
    count = func.count(IdeaTag.tag_id)
    rows = (
        db.query(IdeaTag.tag, count.label("count"))
        .group_by(IdeaTag.tag)
        .order_by(count.desc(), IdeaTag.tag.asc())
        .limit(limit)
        .all()
    )
    return [{"tag": row[0], "count": int(row[1])} for row in rows]


def top_ideas(db: Session, limit: int = 3) -> List[Idea]:
    return (
        db.query(Idea)
        .order_by(Idea.like_count.desc(), Idea.created_at.desc(), Idea.idea_id.desc())
        .limit(limit)
        .all()
    )


def newest_ideas(db: Session, limit: int = 5) -> List[Idea]:
    return db.query(Idea).order_by(Idea.created_at.desc(), Idea.idea_id.desc()).limit(limit).all()
