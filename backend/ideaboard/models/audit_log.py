"""Append-only audit trail model."""

from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from ideaboard.database import Base


class AuditLog(Base):
    __tablename__ = "audit_log"

    audit_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"))
    action = Column(String(30), nullable=False)  # CREATE/UPDATE/DELETE/STATUS_CHANGE/LOGIN
    entity_type = Column(String(50), nullable=False)
    entity_id = Column(Integer)
    old_value = Column(Text)  # JSON
    new_value = Column(Text)  # JSON
    created_at = Column(DateTime, default=datetime.now)

    __table_args__ = (
        Index("idx_audit_entity", "entity_type", "entity_id"),
        Index("idx_audit_created", "created_at"),
    )
