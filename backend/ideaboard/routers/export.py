"""Export API router. CSV and PDF reports for project managers and admins."""

from datetime import datetime

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from ideaboard.database import get_db
from ideaboard.services import export_service
from ideaboard.middleware.auth_middleware import require_roles
from ideaboard.models.user import User
from ideaboard.utils.permissions import PROJECT_MANAGER

router = APIRouter(prefix="/api/export", tags=["export"])


def _attachment(content, media_type: str, stem: str, ext: str) -> Response:
    filename = f"{stem}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.{ext}"
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/ideas/csv")
def export_ideas_csv(db: Session = Depends(get_db), _user: User = Depends(require_roles(PROJECT_MANAGER))):
    return _attachment(export_service.ideas_csv(db), "text/csv; charset=utf-8", "ideas", "csv")


@router.get("/users/csv")
def export_users_csv(db: Session = Depends(get_db), _user: User = Depends(require_roles(PROJECT_MANAGER))):
    return _attachment(export_service.users_csv(db), "text/csv; charset=utf-8", "users", "csv")


@router.get("/statistics/csv")
def export_statistics_csv(db: Session = Depends(get_db), _user: User = Depends(require_roles(PROJECT_MANAGER))):
    return _attachment(export_service.statistics_csv(db), "text/csv; charset=utf-8", "statistics", "csv")


@router.get("/statistics/pdf")
def export_statistics_pdf(db: Session = Depends(get_db), _user: User = Depends(require_roles(PROJECT_MANAGER))):
    return _attachment(export_service.statistics_pdf(db), "application/pdf", "statistics", "pdf")
