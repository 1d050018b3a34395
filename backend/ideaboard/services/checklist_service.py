"""Checklist Service domain layer. Checklist items drive an idea's progress percentage."""

from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session
from ideaboard.models.idea import Idea, ChecklistItem
from ideaboard.models.user import User
from ideaboard.services.idea_service import get_idea_or_404

MAX_TITLE_LENGTH = 200


def _ensure_author(idea: Idea, current_user: User):
    if idea.author_id != current_user.user_id:
        raise HTTPException(status_code=403, detail="Only the idea author can modify the checklist")


def _validate_title(title: Optional[str]) -> str:
    text = (title or "").strip()
    if not text:
        raise HTTPException(status_code=400, detail="Checklist item title is required")
    if len(text) > MAX_TITLE_LENGTH:
        raise HTTPException(status_code=400, detail=f"Title must be at most {MAX_TITLE_LENGTH} characters")
    return text


def _get_item(db: Session, idea_id: int, item_id: int) -> ChecklistItem:
    item = db.query(ChecklistItem).filter(ChecklistItem.item_id == item_id).first()
    if not item:
        raise HTTPException(status_code=404, detail="Checklist item not found")
    if item.idea_id != idea_id:
        raise HTTPException(status_code=400, detail="Checklist item does not belong to this idea")
    return item


def progress_for(completed: int, total: int) -> int:
    ratio = Decimal(100 * completed) / Decimal(total)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def recalculate_progress(db: Session, idea: Idea) -> Optional[int]:
    db.flush()
    total = db.query(func.count(ChecklistItem.item_id)).filter(ChecklistItem.idea_id == idea.idea_id).scalar() or 0
    if total == 0:
        return None
    completed = (
        db.query(func.count(ChecklistItem.item_id))
        .filter(ChecklistItem.idea_id == idea.idea_id, ChecklistItem.is_completed == True)  # noqa: E712
        .scalar()
        or 0
    )
    idea.progress_percentage = progress_for(completed, total)
    return idea.progress_percentage


def list_items(db: Session, idea_id: int) -> List[ChecklistItem]:
    get_idea_or_404(db, idea_id)
    return (
        db.query(ChecklistItem)
        .filter(ChecklistItem.idea_id == idea_id)
        .order_by(ChecklistItem.ordinal_position.asc(), ChecklistItem.item_id.asc())
        .all()
    )


def create_item(db: Session, idea_id: int, title: str, current_user: User) -> ChecklistItem:
    idea = get_idea_or_404(db, idea_id)
    _ensure_author(idea, current_user)
    text = _validate_title(title)

    max_position = (
        db.query(func.max(ChecklistItem.ordinal_position)).filter(ChecklistItem.idea_id == idea_id).scalar()
    )
    item = ChecklistItem(
        idea_id=idea_id,
        title=text,
        is_completed=False,
        ordinal_position=0 if max_position is None else max_position + 1,
    )
    db.add(item)
    recalculate_progress(db, idea)
    db.commit()
    db.refresh(item)
    return item


def toggle_item(db: Session, idea_id: int, item_id: int, current_user: User) -> ChecklistItem:
    idea = get_idea_or_404(db, idea_id)
    _ensure_author(idea, current_user)
    item = _get_item(db, idea_id, item_id)

    item.is_completed = not item.is_completed
    recalculate_progress(db, idea)
    db.commit()
    db.refresh(item)
    return item


def update_item(
    db: Session,
    idea_id: int,
    item_id: int,
    current_user: User,
    title: Optional[str] = None,
    is_completed: Optional[bool] = None,
) -> ChecklistItem:
    idea = get_idea_or_404(db, idea_id)
    _ensure_author(idea, current_user)
    item = _get_item(db, idea_id, item_id)

    if title is not None:
        item.title = _validate_title(title)
    if is_completed is not None:
        item.is_completed = is_completed
    recalculate_progress(db, idea)
    db.commit()
    db.refresh(item)
    return item


def delete_item(db: Session, idea_id: int, item_id: int, current_user: User):
    idea = get_idea_or_404(db, idea_id)
    _ensure_author(idea, current_user)
    item = _get_item(db, idea_id, item_id)

    db.delete(item)
    recalculate_progress(db, idea)
    db.commit()
