"""Audit log API router (admin only)."""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from ideaboard.database import get_db
from ideaboard.schemas.audit import AuditLogOut
from ideaboard.services import audit_service
from ideaboard.middleware.auth_middleware import require_roles
from ideaboard.models.user import User
from ideaboard.utils.permissions import ADMIN

router = APIRouter(prefix="/api/audit-logs", tags=["audit"])


@router.get("", response_model=List[AuditLogOut])
def list_audit_logs(
    entity_type: str | None = None,
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    _admin: User = Depends(require_roles(ADMIN)),
):
    return audit_service.list_logs(db, entity_type=entity_type, limit=limit)
