"""Gamification Service domain layer. XP awards, level calculation and badge evaluation.

All writes go through the caller's session; nothing here commits.
"""

import logging
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session
from ideaboard.models.user import User, Badge, UserBadge
from ideaboard.models.idea import Idea
from ideaboard.models.comment import Comment
from ideaboard.services import notification_service

logger = logging.getLogger(__name__)

XP_FOR_IDEA = 50
XP_FOR_COMPLETED = 100
XP_FOR_LIKE_RECEIVED = 10
XP_FOR_COMMENT = 5

# index + 1 == level
LEVEL_THRESHOLDS = (0, 100, 300, 600, 1000, 1500, 2100, 2800)

STANDARD_BADGES = (
    {
        "name": "first_idea",
        "display_name": "First Idea",
        "description": "Submitted your first idea",
        "icon": "lightbulb",
        "criteria": "ideas>=1",
        "xp_reward": 10,
    },
    {
        "name": "idea_machine",
        "display_name": "Idea Machine",
        "description": "Submitted ten ideas",
        "icon": "rocket",
        "criteria": "ideas>=10",
        "xp_reward": 50,
    },
    {
        "name": "popular",
        "display_name": "Popular",
        "description": "Received ten likes on your ideas",
        "icon": "heart",
        "criteria": "likes_received>=10",
        "xp_reward": 30,
    },
    {
        "name": "commentator",
        "display_name": "Commentator",
        "description": "Wrote ten comments",
        "icon": "chat",
        "criteria": "comments>=10",
        "xp_reward": 20,
    },
    {
        "name": "finisher",
        "display_name": "Finisher",
        "description": "Had one of your ideas completed",
        "icon": "trophy",
        "criteria": "completed_ideas>=1",
        "xp_reward": 50,
    },
)


def level_for_xp(xp: int) -> int:
    level = 1
    for index, threshold in enumerate(LEVEL_THRESHOLDS):
        if xp >= threshold:
            level = index + 1
    return level


def xp_for_next_level(level: int) -> int | None:
    if level >= len(LEVEL_THRESHOLDS):
        return None
    return LEVEL_THRESHOLDS[level]


def sync_standard_badges(db: Session) -> List[Badge]:
    existing = {b.name: b for b in db.query(Badge).all()}
    dirty = False
    for config in STANDARD_BADGES:
        if config["name"] not in existing:
            badge = Badge(**config)
            db.add(badge)
            existing[config["name"]] = badge
            dirty = True
    if dirty:
        db.flush()
    return [existing[c["name"]] for c in STANDARD_BADGES]


def award_xp(db: Session, user_id: int, amount: int, check_badges: bool = True) -> int:
    """Add XP atomically and raise the level if a threshold was crossed.

    Returns the new XP total.
    """
    if amount <= 0:
        return db.query(User.xp_points).filter(User.user_id == user_id).scalar() or 0

    db.query(User).filter(User.user_id == user_id).update(
        {"xp_points": User.xp_points + amount}, synchronize_session=False
    )
    xp_points, current_level = db.query(User.xp_points, User.level).filter(User.user_id == user_id).one()
    new_level = level_for_xp(xp_points)
    if new_level > current_level:
        db.query(User).filter(User.user_id == user_id).update({"level": new_level}, synchronize_session=False)
        notification_service.notify_level_up(db, user_id, new_level)
        logger.info("User %s reached level %s", user_id, new_level)

    # loaded instances reload xp/level on next access
    for obj in list(db.identity_map.values()):
        if isinstance(obj, User) and obj.user_id == user_id:
            db.expire(obj, ["xp_points", "level"])

    if check_badges:
        evaluate_badges(db, user_id)
    return xp_points


def _user_metrics(db: Session, user_id: int) -> dict:
    idea_count = db.query(func.count(Idea.idea_id)).filter(Idea.author_id == user_id).scalar() or 0
    likes_received = db.query(func.coalesce(func.sum(Idea.like_count), 0)).filter(Idea.author_id == user_id).scalar() or 0
    comment_count = db.query(func.count(Comment.comment_id)).filter(Comment.author_id == user_id).scalar() or 0
    completed = (
        db.query(func.count(Idea.idea_id))
        .filter(Idea.author_id == user_id, Idea.status == "COMPLETED")
        .scalar()
        or 0
    )
    return {
        "ideas": int(idea_count),
        "likes_received": int(likes_received),
        "comments": int(comment_count),
        "completed_ideas": int(completed),
    }


def _criteria_met(criteria: str, metrics: dict) -> bool:
    key, _, threshold = criteria.partition(">=")
    try:
        return metrics.get(key.strip(), 0) >= int(threshold)
    except ValueError:
        return False


def evaluate_badges(db: Session, user_id: int) -> List[Badge]:
    db.flush()
    badges = sync_standard_badges(db)
    owned = {row[0] for row in db.query(UserBadge.badge_id).filter(UserBadge.user_id == user_id).all()}
    metrics = _user_metrics(db, user_id)

    earned = []
    for badge in badges:
        if badge.badge_id in owned or not badge.criteria:
            continue
        if not _criteria_met(badge.criteria, metrics):
            continue
        db.add(UserBadge(user_id=user_id, badge_id=badge.badge_id))
        notification_service.notify_badge(db, user_id, badge)
        earned.append(badge)
        logger.info("User %s earned badge %s", user_id, badge.name)
    if earned:
        db.flush()
    return earned


def list_badges(db: Session, user_id: int) -> List[dict]:
    badges = sync_standard_badges(db)
    db.commit()
    owned = {
        row.badge_id: row.earned_at
        for row in db.query(UserBadge).filter(UserBadge.user_id == user_id).all()
    }
    return [
        {
            "badge_id": b.badge_id,
            "name": b.name,
            "display_name": b.display_name,
            "description": b.description,
            "icon": b.icon,
            "criteria": b.criteria,
            "xp_reward": b.xp_reward,
            "earned": b.badge_id in owned,
            "earned_at": owned.get(b.badge_id),
        }
        for b in badges
    ]
