"""Dashboard Service domain layer. Read-only aggregates for the landing page."""

from datetime import datetime, timedelta
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session
from ideaboard.models.idea import Idea
from ideaboard.models.user import User
from ideaboard.services import export_service, idea_service, survey_service
from ideaboard.services.like_service import quota_window_start

ACTIVITY_DAYS = 7


def _weekly_activity(db: Session) -> List[dict]:
    today = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0)
    start = today - timedelta(days=ACTIVITY_DAYS - 1)
    created = [row[0] for row in db.query(Idea.created_at).filter(Idea.created_at >= start).all()]
    days = []
    for offset in range(ACTIVITY_DAYS):
        day = (start + timedelta(days=offset)).date()
        days.append({"date": day.isoformat(), "ideas": sum(1 for c in created if c and c.date() == day)})
    return days


def statistics(db: Session) -> dict:
    overview = export_service.overview(db)
    statuses = export_service.status_counts(db)
    categories = export_service.category_counts(db)
    ideas_this_week = (
        db.query(func.count(Idea.idea_id)).filter(Idea.created_at >= quota_window_start()).scalar() or 0
    )
    return {
        "total_ideas": overview["total_ideas"],
        "total_users": overview["total_users"],
        "ideas_this_week": ideas_this_week,
        "concept_count": statuses[idea_service.CONCEPT],
        "in_progress_count": statuses[idea_service.IN_PROGRESS],
        "completed_count": statuses[idea_service.COMPLETED],
        "total_likes": overview["total_likes"],
        "total_comments": overview["total_comments"],
        "active_surveys": survey_service.count_active(db),
        "popular_category": categories[0][0] if categories else "N/A",
        "category_breakdown": [{"category": c, "count": n} for c, n in categories],
        "weekly_activity": _weekly_activity(db),
    }


def top_ideas(db: Session, current_user: User, limit: int = 3) -> List[dict]:
    ideas = idea_service.top_ideas(db, limit)
    serialized = idea_service.serialize_many(db, ideas, current_user)
    return [
        {"rank": rank, "like_count": data["like_count"], "idea": data}
        for rank, data in enumerate(serialized, start=1)
    ]


def new_ideas(db: Session, current_user: User, limit: int = 5) -> List[dict]:
    return idea_service.serialize_many(db, idea_service.newest_ideas(db, limit), current_user)
