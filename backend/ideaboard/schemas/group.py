"""Idea group and group chat schemas."""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class GroupMemberOut(BaseModel):
    user_id: int
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str
    joined_at: Optional[datetime] = None


class GroupMessageCreate(BaseModel):
    content: str


class GroupMessageOut(BaseModel):
    message_id: int
    group_id: int
    sender_id: int
    sender_username: str
    content: str
    created_at: Optional[datetime] = None


class GroupOut(BaseModel):
    group_id: int
    idea_id: int
    idea_title: Optional[str] = None
    name: str
    description: Optional[str] = None
    created_by: int
    member_count: int
    members: List[GroupMemberOut] = Field(default_factory=list)
    unread_count: int = 0
    last_message: Optional[GroupMessageOut] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MembershipOut(BaseModel):
    group_id: int
    is_member: bool
    role: Optional[str] = None


class UnreadCountOut(BaseModel):
    unread_count: int
