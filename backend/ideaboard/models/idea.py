"""Idea SQLAlchemy models: the idea itself plus the rows it owns."""

from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ideaboard.database import Base


class Idea(Base):
    __tablename__ = "ideas"

    idea_id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=False)
    author_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    status = Column(String(20), nullable=False, default="CONCEPT")  # CONCEPT/IN_PROGRESS/COMPLETED
    progress_percentage = Column(Integer, nullable=False, default=0)
    like_count = Column(Integer, nullable=False, default=0)
    comment_count = Column(Integer, nullable=False, default=0)
    view_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    author = relationship("User", back_populates="ideas")
    tags = relationship(
        "IdeaTag", back_populates="idea", cascade="all, delete-orphan", order_by="IdeaTag.position"
    )
    checklist_items = relationship(
        "ChecklistItem",
        back_populates="idea",
        cascade="all, delete-orphan",
        order_by="ChecklistItem.ordinal_position",
    )
    attachments = relationship("FileAttachment", back_populates="idea", cascade="all, delete-orphan")
    likes = relationship("Like", back_populates="idea", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="idea", cascade="all, delete-orphan")
    group = relationship("IdeaGroup", back_populates="idea", uselist=False, cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_idea_status", "status"),
        Index("idx_idea_category", "category"),
        Index("idx_idea_created", "created_at"),
    )

    @property
    def tag_names(self) -> list[str]:
        return [t.tag for t in self.tags]


class IdeaTag(Base):
    __tablename__ = "idea_tag"

    tag_id = Column(Integer, primary_key=True, autoincrement=True)
    idea_id = Column(Integer, ForeignKey("ideas.idea_id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    tag = Column(String(50), nullable=False)

    idea = relationship("Idea", back_populates="tags")

    __table_args__ = (
        Index("idx_idea_tag", "idea_id", "position"),
    )


class ChecklistItem(Base):
    __tablename__ = "checklist_item"

    item_id = Column(Integer, primary_key=True, autoincrement=True)
    idea_id = Column(Integer, ForeignKey("ideas.idea_id", ondelete="CASCADE"), nullable=False)
    title = Column(String(200), nullable=False)
    is_completed = Column(Boolean, nullable=False, default=False)
    ordinal_position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    idea = relationship("Idea", back_populates="checklist_items")


class FileAttachment(Base):
    __tablename__ = "file_attachment"

    file_id = Column(Integer, primary_key=True, autoincrement=True)
    idea_id = Column(Integer, ForeignKey("ideas.idea_id", ondelete="CASCADE"), nullable=False)
    filename = Column(String(255), nullable=False)
    original_name = Column(String(255), nullable=False)
    mime_type = Column(String(100), nullable=False)
    file_size = Column(Integer, nullable=False)
    file_path = Column(String(500), nullable=False)
    uploaded_by = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    idea = relationship("Idea", back_populates="attachments")
    uploader = relationship("User")


class Like(Base):
    __tablename__ = "idea_like"

    like_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    idea_id = Column(Integer, ForeignKey("ideas.idea_id", ondelete="CASCADE"), nullable=False)
    # local time; the weekly quota window is computed in local time as well
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    idea = relationship("Idea", back_populates="likes")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint("user_id", "idea_id", name="uq_like_user_idea"),
        Index("idx_like_user_created", "user_id", "created_at"),
    )
