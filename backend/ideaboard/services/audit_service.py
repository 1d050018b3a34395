"""Audit Service domain layer. Appends audit entries inside the caller's transaction."""

import json
from typing import List, Optional

from sqlalchemy.orm import Session
from ideaboard.models.audit_log import AuditLog

CREATE = "CREATE"
UPDATE = "UPDATE"
DELETE = "DELETE"
STATUS_CHANGE = "STATUS_CHANGE"
LOGIN = "LOGIN"


def _dump(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, default=str)


def log(
    db: Session,
    actor_id: Optional[int],
    action: str,
    entity_type: str,
    entity_id: Optional[int],
    old_value=None,
    new_value=None,
) -> AuditLog:
    entry = AuditLog(
        user_id=actor_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        old_value=_dump(old_value),
        new_value=_dump(new_value),
    )
    db.add(entry)
    return entry


def list_logs(db: Session, entity_type: Optional[str] = None, limit: int = 100) -> List[AuditLog]:
    q = db.query(AuditLog)
    if entity_type:
        q = q.filter(AuditLog.entity_type == entity_type)
    return q.order_by(AuditLog.created_at.desc(), AuditLog.audit_id.desc()).limit(limit).all()
