"""Survey SQLAlchemy models."""

from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from ideaboard.database import Base


class Survey(Base):
    __tablename__ = "survey"

    survey_id = Column(Integer, primary_key=True, autoincrement=True)
    creator_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    question = Column(String(500), nullable=False)
    description = Column(Text)
    is_active = Column(Boolean, nullable=False, default=True)
    is_anonymous = Column(Boolean, nullable=False, default=False)
    allow_multiple_votes = Column(Boolean, nullable=False, default=False)
    total_votes = Column(Integer, nullable=False, default=0)
    expires_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.now)

    creator = relationship("User")
    options = relationship(
        "SurveyOption", back_populates="survey", cascade="all, delete-orphan", order_by="SurveyOption.display_order"
    )
    votes = relationship("SurveyVote", back_populates="survey", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_survey_active", "is_active", "created_at"),
    )


class SurveyOption(Base):
    __tablename__ = "survey_option"

    option_id = Column(Integer, primary_key=True, autoincrement=True)
    survey_id = Column(Integer, ForeignKey("survey.survey_id", ondelete="CASCADE"), nullable=False)
    option_text = Column(String(255), nullable=False)
    display_order = Column(Integer, nullable=False, default=0)
    vote_count = Column(Integer, nullable=False, default=0)

    survey = relationship("Survey", back_populates="options")


class SurveyVote(Base):
    __tablename__ = "survey_vote"

    vote_id = Column(Integer, primary_key=True, autoincrement=True)
    survey_id = Column(Integer, ForeignKey("survey.survey_id", ondelete="CASCADE"), nullable=False)
    option_id = Column(Integer, ForeignKey("survey_option.option_id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, default=datetime.now)

    survey = relationship("Survey", back_populates="votes")

    __table_args__ = (
        UniqueConstraint("option_id", "user_id", name="uq_survey_vote"),
        Index("idx_survey_vote_user", "survey_id", "user_id"),
    )
