"""Idea discussion group SQLAlchemy models."""

from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from ideaboard.database import Base


class IdeaGroup(Base):
    __tablename__ = "idea_group"

    group_id = Column(Integer, primary_key=True, autoincrement=True)
    idea_id = Column(Integer, ForeignKey("ideas.idea_id", ondelete="CASCADE"), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    created_by = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now)

    idea = relationship("Idea", back_populates="group")
    creator = relationship("User")
    members = relationship(
        "GroupMember", back_populates="group", cascade="all, delete-orphan", order_by="GroupMember.joined_at"
    )
    messages = relationship(
        "GroupMessage", back_populates="group", cascade="all, delete-orphan", order_by="GroupMessage.created_at"
    )


class GroupMember(Base):
    __tablename__ = "group_member"

    member_id = Column(Integer, primary_key=True, autoincrement=True)
    group_id = Column(Integer, ForeignKey("idea_group.group_id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    role = Column(String(20), nullable=False, default="MEMBER")  # CREATOR/MEMBER
    joined_at = Column(DateTime, default=datetime.now)

    group = relationship("IdeaGroup", back_populates="members")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint("group_id", "user_id", name="uq_group_member"),
    )


class GroupMessage(Base):
    __tablename__ = "group_message"

    message_id = Column(Integer, primary_key=True, autoincrement=True)
    group_id = Column(Integer, ForeignKey("idea_group.group_id", ondelete="CASCADE"), nullable=False)
    sender_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.now)

    group = relationship("IdeaGroup", back_populates="messages")
    sender = relationship("User")
    reads = relationship("GroupMessageRead", back_populates="message", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_group_message", "group_id", "created_at"),
    )


class GroupMessageRead(Base):
    __tablename__ = "group_message_read"

    read_id = Column(Integer, primary_key=True, autoincrement=True)
    message_id = Column(Integer, ForeignKey("group_message.message_id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    read_at = Column(DateTime, default=datetime.now)

    message = relationship("GroupMessage", back_populates="reads")

    __table_args__ = (
        UniqueConstraint("message_id", "user_id", name="uq_message_read"),
    )
