"""Dashboard API router."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from ideaboard.database import get_db
from ideaboard.schemas.dashboard import StatisticsOut, TopIdeaOut
from ideaboard.schemas.idea import IdeaOut
from ideaboard.schemas.survey import SurveyOut
from ideaboard.services import dashboard_service, survey_service
from ideaboard.middleware.auth_middleware import get_current_user
from ideaboard.models.user import User

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/statistics", response_model=StatisticsOut)
def statistics(db: Session = Depends(get_db), _current_user: User = Depends(get_current_user)):
    return dashboard_service.statistics(db)


@router.get("/top-ideas", response_model=List[TopIdeaOut])
def top_ideas(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return dashboard_service.top_ideas(db, current_user)


@router.get("/new-ideas", response_model=List[IdeaOut])
def new_ideas(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return dashboard_service.new_ideas(db, current_user)


@router.get("/surveys", response_model=List[SurveyOut])
def active_surveys(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return survey_service.active_surveys(db, current_user)
