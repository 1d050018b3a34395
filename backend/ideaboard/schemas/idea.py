"""Idea, checklist and attachment request/response schemas."""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from ideaboard.schemas.user import UserSummary


class IdeaCreate(BaseModel):
    title: str = Field(max_length=200)
    description: str
    category: str = Field(max_length=100)
    tags: List[str] = Field(default_factory=list)


class IdeaUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=100)
    tags: Optional[List[str]] = None


class IdeaStatusUpdate(BaseModel):
    status: str


class ChecklistItemCreate(BaseModel):
    title: str


class ChecklistItemUpdate(BaseModel):
    title: Optional[str] = None
    is_completed: Optional[bool] = None


class ChecklistItemOut(BaseModel):
    item_id: int
    idea_id: int
    title: str
    is_completed: bool
    ordinal_position: int
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class FileAttachmentOut(BaseModel):
    file_id: int
    idea_id: int
    original_name: str
    mime_type: str
    file_size: int
    uploaded_by: int
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class IdeaOut(BaseModel):
    idea_id: int
    title: str
    description: str
    category: str
    status: str
    progress_percentage: int
    like_count: int
    comment_count: int
    view_count: int
    author: UserSummary
    tags: List[str] = Field(default_factory=list)
    is_liked_by_current_user: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class IdeaDetailOut(IdeaOut):
    checklist_items: List[ChecklistItemOut] = Field(default_factory=list)
    attachments: List[FileAttachmentOut] = Field(default_factory=list)
    group_id: Optional[int] = None


class IdeaPage(BaseModel):
    content: List[IdeaOut]
    total_elements: int
    total_pages: int
    size: int
    number: int
    first: bool
    last: bool


class TagCountOut(BaseModel):
    tag: str
    count: int


class LikeResultOut(BaseModel):
    idea_id: int
    like_count: int
    liked: bool
    remaining_likes: int
