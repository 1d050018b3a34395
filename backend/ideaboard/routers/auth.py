"""Auth API router: registration, login, token refresh."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from ideaboard.database import get_db
from ideaboard.schemas.user import LoginRequest, RefreshRequest, RegisterRequest, TokenResponse, UserOut
from ideaboard.services import auth_service
from ideaboard.middleware.auth_middleware import get_current_user
from ideaboard.models.user import User

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, db: Session = Depends(get_db)):
    return auth_service.register(db, request)


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    return auth_service.login(db, request)


@router.post("/refresh", response_model=TokenResponse)
def refresh(request: RefreshRequest, db: Session = Depends(get_db)):
    return auth_service.refresh(db, request.refresh_token)


@router.post("/logout")
def logout(current_user: User = Depends(get_current_user)):
    return {"message": "Logged out"}


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    return current_user
