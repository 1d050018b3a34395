"""Notification Service domain layer.

Builders here only add rows to the current session; the calling service
commits them together with the change that triggered the notification.
"""

from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session
from ideaboard.models.notification import Notification

LIKE = "LIKE"
COMMENT = "COMMENT"
REACTION = "REACTION"
STATUS_CHANGE = "STATUS_CHANGE"
BADGE_EARNED = "BADGE_EARNED"
LEVEL_UP = "LEVEL_UP"
GROUP_JOIN = "GROUP_JOIN"
MESSAGE = "MESSAGE"

STATUS_LABELS = {
    "CONCEPT": "Concept",
    "IN_PROGRESS": "In Progress",
    "COMPLETED": "Completed",
}


def truncate(text: Optional[str], max_length: int) -> str:
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def idea_link(idea_id: int) -> str:
    return f"/ideas/{idea_id}"


def create_notification(
    db: Session,
    user_id: int,
    noti_type: str,
    title: str,
    message: Optional[str] = None,
    link: Optional[str] = None,
    sender_id: Optional[int] = None,
    related_entity_type: Optional[str] = None,
    related_entity_id: Optional[int] = None,
) -> Notification:
    noti = Notification(
        user_id=user_id,
        sender_id=sender_id,
        noti_type=noti_type,
        title=title,
        message=message,
        link=link,
        related_entity_type=related_entity_type,
        related_entity_id=related_entity_id,
        is_read=False,
    )
    db.add(noti)
    return noti


def notify_like(db: Session, idea, liker) -> Notification:
    return create_notification(
        db,
        user_id=idea.author_id,
        noti_type=LIKE,
        title="New like on your idea",
        message=f"{liker.username} liked your idea \"{truncate(idea.title, 50)}\"",
        link=idea_link(idea.idea_id),
        sender_id=liker.user_id,
        related_entity_type="Idea",
        related_entity_id=idea.idea_id,
    )


def notify_comment(db: Session, idea, comment, commenter) -> Notification:
    return create_notification(
        db,
        user_id=idea.author_id,
        noti_type=COMMENT,
        title="New comment on your idea",
        message=f"{commenter.username} commented: \"{truncate(comment.content, 50)}\"",
        link=idea_link(idea.idea_id),
        sender_id=commenter.user_id,
        related_entity_type="Comment",
        related_entity_id=comment.comment_id,
    )


def notify_reaction(db: Session, comment, emoji: str, reactor) -> Notification:
    return create_notification(
        db,
        user_id=comment.author_id,
        noti_type=REACTION,
        title="New reaction on your comment",
        message=f"{reactor.username} reacted {emoji} to \"{truncate(comment.content, 30)}\"",
        link=idea_link(comment.idea_id),
        sender_id=reactor.user_id,
        related_entity_type="Comment",
        related_entity_id=comment.comment_id,
    )


def notify_status_change(db: Session, idea, old_status: str, new_status: str, actor) -> Notification:
    old_label = STATUS_LABELS.get(old_status, old_status)
    new_label = STATUS_LABELS.get(new_status, new_status)
    return create_notification(
        db,
        user_id=idea.author_id,
        noti_type=STATUS_CHANGE,
        title="Idea status changed",
        message=f"\"{truncate(idea.title, 50)}\" moved from {old_label} to {new_label}",
        link=idea_link(idea.idea_id),
        sender_id=actor.user_id,
        related_entity_type="Idea",
        related_entity_id=idea.idea_id,
    )


def notify_badge(db: Session, user_id: int, badge) -> Notification:
    return create_notification(
        db,
        user_id=user_id,
        noti_type=BADGE_EARNED,
        title="Badge Earned!",
        message=f"Congratulations! You earned the \"{badge.display_name}\" badge",
        link="/profile",
        related_entity_type="Badge",
        related_entity_id=badge.badge_id,
    )


def notify_level_up(db: Session, user_id: int, new_level: int) -> Notification:
    return create_notification(
        db,
        user_id=user_id,
        noti_type=LEVEL_UP,
        title="Level Up!",
        message=f"Congratulations! You reached Level {new_level}",
        link="/profile",
        related_entity_type="User",
        related_entity_id=user_id,
    )


def notify_group_join(db: Session, group, joiner) -> Notification:
    return create_notification(
        db,
        user_id=group.created_by,
        noti_type=GROUP_JOIN,
        title="New group member",
        message=f"{joiner.username} joined \"{truncate(group.name, 50)}\"",
        link=f"/groups/{group.group_id}",
        sender_id=joiner.user_id,
        related_entity_type="IdeaGroup",
        related_entity_id=group.group_id,
    )


def notify_message(db: Session, recipient_id: int, group, message, sender) -> Notification:
    return create_notification(
        db,
        user_id=recipient_id,
        noti_type=MESSAGE,
        title=f"New message in {truncate(group.name, 30)}",
        message=f"{sender.username}: {truncate(message.content, 50)}",
        link=f"/groups/{group.group_id}",
        sender_id=sender.user_id,
        related_entity_type="GroupMessage",
        related_entity_id=message.message_id,
    )


def get_notifications(db: Session, user_id: int, unread_only: bool = False, limit: int = 50) -> List[Notification]:
    q = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        q = q.filter(Notification.is_read == False)  # noqa: E712
    return q.order_by(Notification.created_at.desc(), Notification.notification_id.desc()).limit(limit).all()


def unread_count(db: Session, user_id: int) -> int:
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read == False)  # noqa: E712
        .count()
    )


def mark_read(db: Session, notification_id: int, user_id: int) -> Notification:
    noti = db.query(Notification).filter(
        Notification.notification_id == notification_id,
        Notification.user_id == user_id,
    ).first()
    if not noti:
        raise HTTPException(status_code=404, detail="Notification not found")
    noti.is_read = True
    db.commit()
    db.refresh(noti)
    return noti


def mark_all_read(db: Session, user_id: int) -> int:
    updated = db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read == False,  # noqa: E712
    ).update({"is_read": True}, synchronize_session=False)
    db.commit()
    return updated
