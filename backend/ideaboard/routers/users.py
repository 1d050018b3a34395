"""Users API router. Own profile, like quota, badges and admin user management."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from ideaboard.database import get_db
from ideaboard.schemas.user import ActiveUpdate, BadgeOut, LikeStatusOut, RoleUpdate, UserOut, UserProfileUpdate
from ideaboard.services import gamification_service, like_service, user_service
from ideaboard.middleware.auth_middleware import get_current_user, require_roles
from ideaboard.models.user import User
from ideaboard.utils.permissions import ADMIN

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me", response_model=UserOut)
def get_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/me", response_model=UserOut)
def update_me(data: UserProfileUpdate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return user_service.update_me(db, data, current_user)


@router.get("/me/likes/remaining", response_model=LikeStatusOut)
def remaining_likes(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return like_service.like_status(db, current_user)


@router.get("/me/badges", response_model=List[BadgeOut])
def my_badges(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return gamification_service.list_badges(db, current_user.user_id)


@router.get("", response_model=List[UserOut])
def list_users(db: Session = Depends(get_db), _admin: User = Depends(require_roles(ADMIN))):
    return user_service.list_users(db)


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, db: Session = Depends(get_db), _admin: User = Depends(require_roles(ADMIN))):
    return user_service.get_user(db, user_id)


@router.put("/{user_id}/role", response_model=UserOut)
def update_role(
    user_id: int,
    data: RoleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN)),
):
    return user_service.update_role(db, user_id, data.role, current_user)


@router.put("/{user_id}/status", response_model=UserOut)
def update_active(
    user_id: int,
    data: ActiveUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN)),
):
    return user_service.set_active(db, user_id, data.is_active, current_user)
