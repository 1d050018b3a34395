"""Dashboard statistics schemas."""

from pydantic import BaseModel, Field
from typing import List

from ideaboard.schemas.idea import IdeaOut


class CategoryCountOut(BaseModel):
    category: str
    count: int


class DailyActivityOut(BaseModel):
    date: str
    ideas: int


class StatisticsOut(BaseModel):
    total_ideas: int
    total_users: int
    ideas_this_week: int
    concept_count: int
    in_progress_count: int
    completed_count: int
    total_likes: int
    total_comments: int
    active_surveys: int
    popular_category: str
    category_breakdown: List[CategoryCountOut] = Field(default_factory=list)
    weekly_activity: List[DailyActivityOut] = Field(default_factory=list)


class TopIdeaOut(BaseModel):
    rank: int
    like_count: int
    idea: IdeaOut
