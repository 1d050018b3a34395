"""Surveys API router."""

from typing import List

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from ideaboard.database import get_db
from ideaboard.schemas.survey import SurveyCreate, SurveyOut, SurveyPage, VoteRequest
from ideaboard.services import survey_service
from ideaboard.middleware.auth_middleware import get_current_user
from ideaboard.models.user import User

router = APIRouter(prefix="/api/surveys", tags=["surveys"])


@router.get("", response_model=SurveyPage)
def list_surveys(
    page: int = Query(0, ge=0),
    size: int = Query(survey_service.DEFAULT_PAGE_SIZE, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return survey_service.list_surveys(db, current_user, page=page, size=size)


@router.get("/active", response_model=List[SurveyOut])
def active_surveys(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return survey_service.active_surveys(db, current_user)


@router.post("", response_model=SurveyOut, status_code=status.HTTP_201_CREATED)
def create_survey(data: SurveyCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return survey_service.create_survey(db, data, current_user)


@router.get("/{survey_id}", response_model=SurveyOut)
def get_survey(survey_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return survey_service.get_survey(db, survey_id, current_user)


@router.post("/{survey_id}/vote", response_model=SurveyOut)
def vote(
    survey_id: int,
    data: VoteRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return survey_service.vote(db, survey_id, data.option_ids, current_user)


@router.put("/{survey_id}/close", response_model=SurveyOut)
def close_survey(survey_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return survey_service.close_survey(db, survey_id, current_user)


@router.delete("/{survey_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_survey(survey_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    survey_service.delete_survey(db, survey_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
