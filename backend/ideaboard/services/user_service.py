"""User Service domain layer. Profile self-service and admin user management."""

import logging
from typing import List

from fastapi import HTTPException
from sqlalchemy.orm import Session
from ideaboard.models.user import User
from ideaboard.schemas.user import UserProfileUpdate
from ideaboard.services import audit_service
from ideaboard.utils.permissions import ALL_ROLES

logger = logging.getLogger(__name__)


def _get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def update_me(db: Session, data: UserProfileUpdate, current_user: User) -> User:
    before = {"first_name": current_user.first_name, "last_name": current_user.last_name, "email": current_user.email}
    if data.first_name is not None:
        current_user.first_name = data.first_name.strip() or None
    if data.last_name is not None:
        current_user.last_name = data.last_name.strip() or None
    if data.email is not None:
        email = str(data.email).strip().lower()
        taken = (
            db.query(User.user_id)
            .filter(User.email == email, User.user_id != current_user.user_id)
            .first()
        )
        if taken:
            raise HTTPException(status_code=409, detail="Email already exists")
        current_user.email = email
    after = {"first_name": current_user.first_name, "last_name": current_user.last_name, "email": current_user.email}
    audit_service.log(db, current_user.user_id, audit_service.UPDATE, "User", current_user.user_id, before, after)
    db.commit()
    db.refresh(current_user)
    return current_user


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.user_id.asc()).all()


def get_user(db: Session, user_id: int) -> User:
    return _get_user(db, user_id)


def update_role(db: Session, user_id: int, role: str, current_user: User) -> User:
    new_role = (role or "").strip().upper()
    if new_role not in ALL_ROLES:
        raise HTTPException(status_code=400, detail=f"Invalid role: {role}")
    user = _get_user(db, user_id)
    old_role = user.role
    user.role = new_role
    audit_service.log(
        db, current_user.user_id, audit_service.UPDATE, "User", user.user_id, {"role": old_role}, {"role": new_role}
    )
    db.commit()
    db.refresh(user)
    logger.info("User %s role %s -> %s by %s", user_id, old_role, new_role, current_user.user_id)
    return user


def set_active(db: Session, user_id: int, is_active: bool, current_user: User) -> User:
    user = _get_user(db, user_id)
    if user.user_id == current_user.user_id and not is_active:
        raise HTTPException(status_code=400, detail="You cannot deactivate your own account")
    old_value = user.is_active
    user.is_active = is_active
    audit_service.log(
        db, current_user.user_id, audit_service.UPDATE, "User", user.user_id,
        {"is_active": old_value}, {"is_active": is_active},
    )
    db.commit()
    db.refresh(user)
    logger.info("User %s active=%s by %s", user_id, is_active, current_user.user_id)
    return user
