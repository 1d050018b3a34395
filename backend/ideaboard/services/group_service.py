"""Group Service domain layer. Per-idea discussion groups, membership and group chat."""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import exists, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from ideaboard.models.group import IdeaGroup, GroupMember, GroupMessage, GroupMessageRead
from ideaboard.models.idea import Idea
from ideaboard.models.user import User
from ideaboard.services import notification_service

logger = logging.getLogger(__name__)

CREATOR = "CREATOR"
MEMBER = "MEMBER"
MARK_READ_ATTEMPTS = 3
MAX_MESSAGE_LENGTH = 2000


def create_group_for_idea(db: Session, idea: Idea, creator: User) -> IdeaGroup:
    group = IdeaGroup(
        idea_id=idea.idea_id,
        name=f"Group: {idea.title}"[:255],
        description=f"Discussion group for idea: {idea.title}",
        created_by=creator.user_id,
    )
    db.add(group)
    db.flush()
    db.add(GroupMember(group_id=group.group_id, user_id=creator.user_id, role=CREATOR))
    db.flush()
    return group


def _get_group(db: Session, group_id: int) -> IdeaGroup:
    group = db.query(IdeaGroup).filter(IdeaGroup.group_id == group_id).first()
    if not group:
        raise HTTPException(status_code=404, detail="Group not found")
    return group


def _get_group_by_idea(db: Session, idea_id: int) -> IdeaGroup:
    group = db.query(IdeaGroup).filter(IdeaGroup.idea_id == idea_id).first()
    if not group:
        raise HTTPException(status_code=404, detail="Group not found for this idea")
    return group


def _membership(db: Session, group_id: int, user_id: int) -> Optional[GroupMember]:
    return (
        db.query(GroupMember)
        .filter(GroupMember.group_id == group_id, GroupMember.user_id == user_id)
        .first()
    )


def _ensure_member(db: Session, group_id: int, current_user: User) -> GroupMember:
    member = _membership(db, group_id, current_user.user_id)
    if not member:
        raise HTTPException(status_code=403, detail="You are not a member of this group")
    return member


def _unread_query(db: Session, user_id: int):
    receipt = exists().where(
        GroupMessageRead.message_id == GroupMessage.message_id,
        GroupMessageRead.user_id == user_id,
    )
    return db.query(GroupMessage).filter(GroupMessage.sender_id != user_id, ~receipt)


def _unread_message_ids(db: Session, group_id: int, user_id: int) -> List[int]:
    rows = _unread_query(db, user_id).filter(GroupMessage.group_id == group_id).all()
    return [row.message_id for row in rows]


def _unread_count(db: Session, group_id: int, user_id: int) -> int:
    return _unread_query(db, user_id).filter(GroupMessage.group_id == group_id).count()


def _serialize_message(message: GroupMessage) -> dict:
    return {
        "message_id": message.message_id,
        "group_id": message.group_id,
        "sender_id": message.sender_id,
        "sender_username": message.sender.username if message.sender else "",
        "content": message.content,
        "created_at": message.created_at,
    }


def _serialize_group(db: Session, group: IdeaGroup, current_user: User, is_member: bool) -> dict:
    last = (
        db.query(GroupMessage)
        .filter(GroupMessage.group_id == group.group_id)
        .order_by(GroupMessage.created_at.desc(), GroupMessage.message_id.desc())
        .first()
    )
    members = [
        {
            "user_id": m.user_id,
            "username": m.user.username,
            "first_name": m.user.first_name,
            "last_name": m.user.last_name,
            "role": m.role,
            "joined_at": m.joined_at,
        }
        for m in group.members
    ]
    return {
        "group_id": group.group_id,
        "idea_id": group.idea_id,
        "idea_title": group.idea.title if group.idea else None,
        "name": group.name,
        "description": group.description,
        "created_by": group.created_by,
        "member_count": len(members),
        "members": members,
        "unread_count": _unread_count(db, group.group_id, current_user.user_id) if is_member else 0,
        "last_message": _serialize_message(last) if last else None,
        "created_at": group.created_at,
        "updated_at": group.updated_at,
    }


def list_user_groups(db: Session, current_user: User) -> List[dict]:
    groups = (
        db.query(IdeaGroup)
        .join(GroupMember, GroupMember.group_id == IdeaGroup.group_id)
        .filter(GroupMember.user_id == current_user.user_id)
        .order_by(IdeaGroup.updated_at.desc(), IdeaGroup.group_id.desc())
        .all()
    )
    return [_serialize_group(db, g, current_user, is_member=True) for g in groups]


def get_group(db: Session, group_id: int, current_user: User) -> dict:
    group = _get_group(db, group_id)
    _ensure_member(db, group_id, current_user)
    return _serialize_group(db, group, current_user, is_member=True)


def get_group_by_idea(db: Session, idea_id: int, current_user: User) -> dict:
    group = _get_group_by_idea(db, idea_id)
    is_member = _membership(db, group.group_id, current_user.user_id) is not None
    return _serialize_group(db, group, current_user, is_member=is_member)


def join_group(db: Session, group_id: int, current_user: User) -> dict:
    group = _get_group(db, group_id)
    if _membership(db, group_id, current_user.user_id):
        raise HTTPException(status_code=409, detail="Already a member of this group")

    db.add(GroupMember(group_id=group_id, user_id=current_user.user_id, role=MEMBER))
    if group.created_by != current_user.user_id:
        notification_service.notify_group_join(db, group, current_user)
    group.updated_at = datetime.now()
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Already a member of this group")
    db.refresh(group)
    logger.info("User %s joined group %s", current_user.user_id, group_id)
    return _serialize_group(db, group, current_user, is_member=True)


def join_group_by_idea(db: Session, idea_id: int, current_user: User) -> dict:
    group = _get_group_by_idea(db, idea_id)
    return join_group(db, group.group_id, current_user)


def leave_group(db: Session, group_id: int, current_user: User):
    _get_group(db, group_id)
    member = _membership(db, group_id, current_user.user_id)
    if not member:
        raise HTTPException(status_code=400, detail="You are not a member of this group")
    if member.role == CREATOR:
        raise HTTPException(status_code=400, detail="The group creator cannot leave the group")
    db.delete(member)
    db.commit()
    logger.info("User %s left group %s", current_user.user_id, group_id)


def list_messages(db: Session, group_id: int, current_user: User) -> List[dict]:
    _get_group(db, group_id)
    _ensure_member(db, group_id, current_user)
    rows = (
        db.query(GroupMessage)
        .filter(GroupMessage.group_id == group_id)
        .order_by(GroupMessage.created_at.asc(), GroupMessage.message_id.asc())
        .all()
    )
    return [_serialize_message(m) for m in rows]


def send_message(db: Session, group_id: int, content: str, current_user: User) -> dict:
    text = (content or "").strip()
    if not text:
        raise HTTPException(status_code=400, detail="Message content is required")
    if len(text) > MAX_MESSAGE_LENGTH:
        raise HTTPException(status_code=400, detail=f"Message must be at most {MAX_MESSAGE_LENGTH} characters")
    group = _get_group(db, group_id)
    _ensure_member(db, group_id, current_user)

    message = GroupMessage(group_id=group_id, sender_id=current_user.user_id, content=text)
    db.add(message)
    db.flush()
    db.add(GroupMessageRead(message_id=message.message_id, user_id=current_user.user_id))
    group.updated_at = datetime.now()

    recipients = [m.user_id for m in group.members if m.user_id != current_user.user_id]
    for user_id in recipients:
        notification_service.notify_message(db, user_id, group, message, current_user)
    db.commit()
    db.refresh(message)
    return _serialize_message(message)


def mark_all_read(db: Session, group_id: int, current_user: User) -> dict:
    _get_group(db, group_id)
    _ensure_member(db, group_id, current_user)
    user_id = current_user.user_id
    for attempt in range(MARK_READ_ATTEMPTS):
        for message_id in _unread_message_ids(db, group_id, user_id):
            db.add(GroupMessageRead(message_id=message_id, user_id=user_id))
        try:
            db.commit()
            break
        except IntegrityError:
            # a concurrent request stored some receipts; recompute what is still unread
            db.rollback()
            logger.info("Concurrent read receipts for group %s user %s (attempt %s)", group_id, user_id, attempt + 1)
    return {"group_id": group_id, "unread_count": _unread_count(db, group_id, user_id)}


def membership(db: Session, group_id: int, current_user: User) -> dict:
    _get_group(db, group_id)
    member = _membership(db, group_id, current_user.user_id)
    return {"group_id": group_id, "is_member": member is not None, "role": member.role if member else None}


def membership_by_idea(db: Session, idea_id: int, current_user: User) -> dict:
    group = _get_group_by_idea(db, idea_id)
    return membership(db, group.group_id, current_user)


def total_unread(db: Session, current_user: User) -> int:
    member_groups = select(GroupMember.group_id).where(GroupMember.user_id == current_user.user_id)
    return (
        _unread_query(db, current_user.user_id)
        .filter(GroupMessage.group_id.in_(member_groups))
        .with_entities(func.count(GroupMessage.message_id))
        .scalar()
        or 0
    )
