"""Comment and reaction schemas."""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from ideaboard.schemas.user import UserSummary


class CommentCreate(BaseModel):
    content: str = Field(max_length=200)


class ReactionCreate(BaseModel):
    emoji: str = Field(min_length=1, max_length=20)


class ReactionSummary(BaseModel):
    emoji: str
    count: int
    user_ids: List[int] = Field(default_factory=list)


class CommentOut(BaseModel):
    comment_id: int
    idea_id: int
    author: UserSummary
    content: str
    reaction_count: int
    reactions: List[ReactionSummary] = Field(default_factory=list)
    created_at: Optional[datetime] = None
