"""Notification schemas."""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class NotificationOut(BaseModel):
    notification_id: int
    user_id: int
    sender_id: Optional[int] = None
    noti_type: str
    title: str
    message: Optional[str] = None
    link: Optional[str] = None
    related_entity_type: Optional[str] = None
    related_entity_id: Optional[int] = None
    is_read: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class NotificationCountOut(BaseModel):
    unread_count: int
