"""Survey request/response schemas."""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class SurveyCreate(BaseModel):
    question: str = Field(max_length=500)
    description: Optional[str] = None
    options: List[str] = Field(default_factory=list)
    is_anonymous: bool = False
    allow_multiple_votes: bool = False
    expires_at: Optional[datetime] = None


class VoteRequest(BaseModel):
    option_ids: List[int] = Field(default_factory=list)


class SurveyOptionOut(BaseModel):
    option_id: int
    option_text: str
    display_order: int
    vote_count: int
    percentage: float = 0.0


class SurveyOut(BaseModel):
    survey_id: int
    question: str
    description: Optional[str] = None
    creator_id: int
    creator_username: Optional[str] = None
    is_active: bool
    is_anonymous: bool
    allow_multiple_votes: bool
    total_votes: int
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    options: List[SurveyOptionOut] = Field(default_factory=list)
    has_voted: bool = False
    user_voted_option_ids: List[int] = Field(default_factory=list)


class SurveyPage(BaseModel):
    content: List[SurveyOut]
    total_elements: int
    total_pages: int
    size: int
    number: int
    first: bool
    last: bool
