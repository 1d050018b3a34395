"""Survey Service domain layer. Quick polls with single or multiple choice voting."""

import logging
import math
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from ideaboard.models.survey import Survey, SurveyOption, SurveyVote
from ideaboard.models.user import User
from ideaboard.schemas.survey import SurveyCreate
from ideaboard.utils.permissions import is_admin

logger = logging.getLogger(__name__)

MIN_OPTIONS = 2
ACTIVE_SURVEY_LIMIT = 10
DEFAULT_PAGE_SIZE = 10


def _get_survey(db: Session, survey_id: int) -> Survey:
    survey = db.query(Survey).filter(Survey.survey_id == survey_id).first()
    if not survey:
        raise HTTPException(status_code=404, detail="Survey not found")
    return survey


def _ensure_owner(survey: Survey, current_user: User):
    if survey.creator_id != current_user.user_id and not is_admin(current_user):
        raise HTTPException(status_code=403, detail="Only the creator or an admin can manage this survey")


def _normalize_options(values: Optional[List[str]]) -> List[str]:
    return [str(v).strip() for v in values or [] if str(v or "").strip()]


def is_open(survey: Survey, now: Optional[datetime] = None) -> bool:
    if not survey.is_active:
        return False
    if survey.expires_at is None:
        return True
    return survey.expires_at > (now or datetime.now())


def _voted_option_ids(db: Session, survey_id: int, user_id: int) -> List[int]:
    rows = (
        db.query(SurveyVote.option_id)
        .filter(SurveyVote.survey_id == survey_id, SurveyVote.user_id == user_id)
        .order_by(SurveyVote.option_id.asc())
        .all()
    )
    return [int(row[0]) for row in rows]


def serialize_survey(db: Session, survey: Survey, current_user: User) -> dict:
    voted = _voted_option_ids(db, survey.survey_id, current_user.user_id)
    total = survey.total_votes or 0
    return {
        "survey_id": survey.survey_id,
        "question": survey.question,
        "description": survey.description,
        "creator_id": survey.creator_id,
        "creator_username": survey.creator.username if survey.creator else None,
        "is_active": is_open(survey),
        "is_anonymous": survey.is_anonymous,
        "allow_multiple_votes": survey.allow_multiple_votes,
        "total_votes": total,
        "expires_at": survey.expires_at,
        "created_at": survey.created_at,
        "options": [
            {
                "option_id": o.option_id,
                "option_text": o.option_text,
                "display_order": o.display_order,
                "vote_count": o.vote_count,
                "percentage": round(o.vote_count * 100.0 / total, 1) if total else 0.0,
            }
            for o in survey.options
        ],
        "has_voted": bool(voted),
        "user_voted_option_ids": voted,
    }


def create_survey(db: Session, data: SurveyCreate, current_user: User) -> dict:
    question = (data.question or "").strip()
    if not question:
        raise HTTPException(status_code=400, detail="Question is required")
    options = _normalize_options(data.options)
    if len(options) < MIN_OPTIONS:
        raise HTTPException(status_code=400, detail=f"A survey needs at least {MIN_OPTIONS} options")

    survey = Survey(
        creator_id=current_user.user_id,
        question=question,
        description=(data.description or "").strip() or None,
        is_active=True,
        is_anonymous=data.is_anonymous,
        allow_multiple_votes=data.allow_multiple_votes,
        total_votes=0,
        expires_at=data.expires_at,
    )
    for order, text in enumerate(options):
        survey.options.append(SurveyOption(option_text=text, display_order=order, vote_count=0))
    db.add(survey)
    db.commit()
    db.refresh(survey)
    logger.info("Survey %s created by %s", survey.survey_id, current_user.user_id)
    return serialize_survey(db, survey, current_user)


def list_surveys(db: Session, current_user: User, page: int = 0, size: int = DEFAULT_PAGE_SIZE) -> dict:
    page = max(page, 0)
    size = min(max(size, 1), 100)
    q = db.query(Survey)
    total = q.count()
    rows = q.order_by(Survey.created_at.desc(), Survey.survey_id.desc()).offset(page * size).limit(size).all()
    total_pages = math.ceil(total / size) if total else 0
    return {
        "content": [serialize_survey(db, s, current_user) for s in rows],
        "total_elements": total,
        "total_pages": total_pages,
        "size": size,
        "number": page,
        "first": page == 0,
        "last": page >= total_pages - 1,
    }


def active_surveys(db: Session, current_user: User, limit: int = ACTIVE_SURVEY_LIMIT) -> List[dict]:
    now = datetime.now()
    rows = (
        db.query(Survey)
        .filter(Survey.is_active == True)  # noqa: E712
        .filter((Survey.expires_at == None) | (Survey.expires_at > now))  # noqa: E711
        .order_by(Survey.created_at.desc(), Survey.survey_id.desc())
        .limit(limit)
        .all()
    )
    return [serialize_survey(db, s, current_user) for s in rows]


def count_active(db: Session) -> int:
    now = datetime.now()
    return (
        db.query(Survey)
        .filter(Survey.is_active == True)  # noqa: E712
        .filter((Survey.expires_at == None) | (Survey.expires_at > now))  # noqa: E711
        .count()
    )


def get_survey(db: Session, survey_id: int, current_user: User) -> dict:
    return serialize_survey(db, _get_survey(db, survey_id), current_user)


def vote(db: Session, survey_id: int, option_ids: List[int], current_user: User) -> dict:
    survey = _get_survey(db, survey_id)
    if not option_ids:
        raise HTTPException(status_code=400, detail="At least one option must be selected")
    if not is_open(survey):
        raise HTTPException(status_code=400, detail="Survey is closed")

    already = set(_voted_option_ids(db, survey_id, current_user.user_id))
    if already and not survey.allow_multiple_votes:
        raise HTTPException(status_code=409, detail="You have already voted in this survey")

    valid_ids = {o.option_id for o in survey.options}
    requested = list(dict.fromkeys(option_ids))
    invalid = [oid for oid in requested if oid not in valid_ids]
    if invalid:
        raise HTTPException(status_code=400, detail=f"Invalid option id: {invalid[0]}")
    if not survey.allow_multiple_votes and len(requested) > 1:
        raise HTTPException(status_code=400, detail="This survey allows only one option")

    new_ids = [oid for oid in requested if oid not in already]
    for option_id in new_ids:
        db.add(SurveyVote(survey_id=survey_id, option_id=option_id, user_id=current_user.user_id))
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="You have already voted for this option")

    if new_ids:
        db.query(SurveyOption).filter(SurveyOption.option_id.in_(new_ids)).update(
            {"vote_count": SurveyOption.vote_count + 1}, synchronize_session=False
        )
        db.query(Survey).filter(Survey.survey_id == survey_id).update(
            {"total_votes": Survey.total_votes + len(new_ids)}, synchronize_session=False
        )
    db.commit()

    # counters were changed by UPDATE statements; reload before building the response
    db.refresh(survey)
    for option in survey.options:
        db.refresh(option)
    return serialize_survey(db, survey, current_user)


def close_survey(db: Session, survey_id: int, current_user: User) -> dict:
    survey = _get_survey(db, survey_id)
    _ensure_owner(survey, current_user)
    survey.is_active = False
    db.commit()
    db.refresh(survey)
    return serialize_survey(db, survey, current_user)


def delete_survey(db: Session, survey_id: int, current_user: User):
    survey = _get_survey(db, survey_id)
    _ensure_owner(survey, current_user)
    db.delete(survey)
    db.commit()
    logger.info("Survey %s deleted by %s", survey_id, current_user.user_id)
