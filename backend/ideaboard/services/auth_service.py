"""Auth Service domain layer: password hashing, token issuing and the login/register flows."""

import logging
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from ideaboard.models.user import User
from ideaboard.schemas.user import RegisterRequest, LoginRequest, TokenResponse, UserOut
from ideaboard.services import audit_service
from ideaboard.utils.permissions import EMPLOYEE
from ideaboard.config import settings

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def hash_password(plain: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


def _create_token(user: User, token_type: str, expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.user_id),
        "username": user.username,
        "role": user.role,
        "type": token_type,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def create_access_token(user: User) -> str:
    return _create_token(user, ACCESS_TOKEN_TYPE, timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))


def create_refresh_token(user: User) -> str:
    return _create_token(user, REFRESH_TOKEN_TYPE, timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))


def decode_token(token: str, expected_type: str = ACCESS_TOKEN_TYPE) -> dict:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if payload.get("type") != expected_type:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload


def _token_response(user: User) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(user),
        refresh_token=create_refresh_token(user),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserOut.model_validate(user),
    )


def register(db: Session, data: RegisterRequest) -> TokenResponse:
    username = data.username.strip()
    if db.query(User.user_id).filter(User.username == username).first():
        raise HTTPException(status_code=409, detail="Username already exists")
    email = str(data.email).strip().lower()
    if db.query(User.user_id).filter(User.email == email).first():
        raise HTTPException(status_code=409, detail="Email already exists")

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
        role=EMPLOYEE,
        is_active=True,
        xp_points=0,
        level=1,
    )
    db.add(user)
    db.flush()
    audit_service.log(db, user.user_id, audit_service.CREATE, "User", user.user_id, new_value={"username": username})
    db.commit()
    db.refresh(user)
    logger.info("User registered: %s (id=%s)", user.username, user.user_id)
    return _token_response(user)


def login(db: Session, data: LoginRequest) -> TokenResponse:
    user = db.query(User).filter(User.username == data.username.strip()).first()
    if not user or not verify_password(data.password, user.password_hash):
        logger.warning("Failed login for username=%s", data.username)
        raise HTTPException(status_code=401, detail="Invalid username or password")
    if not user.is_active:
        logger.warning("Login attempt on deactivated account: %s", user.username)
        raise HTTPException(status_code=401, detail="Account is deactivated")

    user.last_login = datetime.now()
    audit_service.log(db, user.user_id, audit_service.LOGIN, "User", user.user_id)
    db.commit()
    db.refresh(user)
    logger.info("User logged in: %s", user.username)
    return _token_response(user)


def refresh(db: Session, refresh_token: str) -> TokenResponse:
    payload = decode_token(refresh_token, expected_type=REFRESH_TOKEN_TYPE)
    user_id = payload.get("sub")
    if user_id is None:
        raise HTTPException(status_code=401, detail="Invalid token payload")
    user = db.query(User).filter(User.user_id == int(user_id)).first()
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found or inactive")
    return _token_response(user)
