"""Role constants and role predicates shared by services and routers."""

from ideaboard.models.user import User


EMPLOYEE = "EMPLOYEE"
PROJECT_MANAGER = "PROJECT_MANAGER"
ADMIN = "ADMIN"

ALL_ROLES = (EMPLOYEE, PROJECT_MANAGER, ADMIN)
MANAGER_ROLES = (PROJECT_MANAGER, ADMIN)


def is_admin(user: User) -> bool:
    return user.role == ADMIN


def is_manager(user: User) -> bool:
    return user.role in MANAGER_ROLES


def has_role(user: User, *roles: str) -> bool:
    # ADMIN acts as any role
    return is_admin(user) or user.role in roles


def can_change_status(user: User) -> bool:
    return is_manager(user)


def can_edit_idea(user: User, author_id: int) -> bool:
    return is_admin(user) or user.user_id == author_id


def can_delete_idea(user: User) -> bool:
    return is_admin(user)


def can_export(user: User) -> bool:
    return is_manager(user)
