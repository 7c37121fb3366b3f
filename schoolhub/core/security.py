"""Security utilities for authentication and authorization."""

from datetime import datetime, timedelta, timezone
from enum import Enum
from functools import lru_cache
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel

from schoolhub.core.settings import settings

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# JWT configuration
ALGORITHM = "HS256"


class UserRole(str, Enum):
    """Portal roles."""

    ADMIN = "ADMIN"
    STAFF = "STAFF"
    PARENT = "PARENT"
    STUDENT = "STUDENT"


# Roles allowed into the back-office endpoints
BACK_OFFICE_ROLES = frozenset({UserRole.ADMIN, UserRole.STAFF})


class Token(BaseModel):
    """Token response model."""

    access_token: str
    token_type: str


class TokenData(BaseModel):
    """Token data model."""

    username: Optional[str] = None
    role: Optional[UserRole] = None


class User(BaseModel):
    """User model for authentication."""

    username: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: UserRole = UserRole.STAFF
    disabled: Optional[bool] = None


class UserInDB(User):
    """User in database model."""

    hashed_password: str


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Get password hash."""
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.access_token_expire_minutes
        )
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)
    return encoded_jwt


def verify_token(token: str) -> Optional[TokenData]:
    """Verify access token."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
        username: str = payload.get("sub")
        if username is None:
            return None
        role = payload.get("role")
        return TokenData(username=username, role=UserRole(role) if role else None)
    except (JWTError, ValueError):
        return None


@lru_cache
def _users_db() -> dict:
    """Back-office accounts configured through settings."""
    return {
        settings.admin_email: {
            "username": settings.admin_email,
            "full_name": "Admin User",
            "email": settings.admin_email,
            "role": UserRole.ADMIN,
            "hashed_password": get_password_hash(settings.admin_password),
            "disabled": False,
        },
        settings.staff_email: {
            "username": settings.staff_email,
            "full_name": "Staff User",
            "email": settings.staff_email,
            "role": UserRole.STAFF,
            "hashed_password": get_password_hash(settings.staff_password),
            "disabled": False,
        },
    }


def get_user(username: str) -> Optional[UserInDB]:
    """Get user from database."""
    users = _users_db()
    if username in users:
        return UserInDB(**users[username])
    return None


def authenticate_user(username: str, password: str) -> Optional[UserInDB]:
    """Authenticate user."""
    user = get_user(username)
    if not user:
        return None
    if user.disabled:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user
