"""Notification SQLAlchemy model."""

from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Index
from sqlalchemy.orm import relationship
from ideaboard.database import Base


class Notification(Base):
    __tablename__ = "notification"

    notification_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    sender_id = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"))
    noti_type = Column(String(30), nullable=False)
    # LIKE/COMMENT/REACTION/STATUS_CHANGE/BADGE_EARNED/LEVEL_UP/GROUP_JOIN/MESSAGE
    title = Column(String(200), nullable=False)
    message = Column(Text)
    link = Column(String(500))
    related_entity_type = Column(String(50))
    related_entity_id = Column(Integer)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.now)

    user = relationship("User", back_populates="notifications", foreign_keys=[user_id])
    sender = relationship("User", foreign_keys=[sender_id])

    __table_args__ = (
        Index("idx_notification_user", "user_id", "is_read", "created_at"),
    )
