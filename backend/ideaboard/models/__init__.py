"""SQLAlchemy model package."""

from ideaboard.models.user import User, Badge, UserBadge
from ideaboard.models.idea import Idea, IdeaTag, ChecklistItem, FileAttachment, Like
from ideaboard.models.comment import Comment, CommentReaction
from ideaboard.models.group import IdeaGroup, GroupMember, GroupMessage, GroupMessageRead
from ideaboard.models.survey import Survey, SurveyOption, SurveyVote
from ideaboard.models.notification import Notification
from ideaboard.models.audit_log import AuditLog

__all__ = [
    "User", "Badge", "UserBadge",
    "Idea", "IdeaTag", "ChecklistItem", "FileAttachment", "Like",
    "Comment", "CommentReaction",
    "IdeaGroup", "GroupMember", "GroupMessage", "GroupMessageRead",
    "Survey", "SurveyOption", "SurveyVote",
    "Notification",
    "AuditLog",
]
