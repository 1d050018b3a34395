"""Service layer package."""

from ideaboard.services import (
    audit_service,
    notification_service,
    gamification_service,
    auth_service,
    user_service,
    group_service,
    idea_service,
    like_service,
    checklist_service,
    comment_service,
    survey_service,
    file_service,
    export_service,
    dashboard_service,
)
