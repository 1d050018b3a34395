"""Comment SQLAlchemy models."""

from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ideaboard.database import Base


class Comment(Base):
    __tablename__ = "comment"

    comment_id = Column(Integer, primary_key=True, autoincrement=True)
    idea_id = Column(Integer, ForeignKey("ideas.idea_id", ondelete="CASCADE"), nullable=False)
    author_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    content = Column(String(200), nullable=False)
    reaction_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    idea = relationship("Idea", back_populates="comments")
    author = relationship("User")
    reactions = relationship("CommentReaction", back_populates="comment", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_comment_idea", "idea_id", "created_at"),
    )


class CommentReaction(Base):
    __tablename__ = "comment_reaction"

    reaction_id = Column(Integer, primary_key=True, autoincrement=True)
    comment_id = Column(Integer, ForeignKey("comment.comment_id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    emoji = Column(String(20), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    comment = relationship("Comment", back_populates="reactions")

    __table_args__ = (
        UniqueConstraint("comment_id", "user_id", "emoji", name="uq_comment_reaction"),
    )
