"""API dependencies for authentication and database access."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.database import get_db
from schoolhub.core.security import BACK_OFFICE_ROLES, User, UserRole, get_user, verify_token

# Security scheme
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)]
) -> User:
    """Get current authenticated user."""
    token_data = verify_token(credentials.credentials) if credentials else None
    if token_data is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = get_user(token_data.username)
    if user is not None:
        return User(**user.model_dump(exclude={"hashed_password"}))

    return User(
        username=token_data.username,
        email=token_data.username,
        role=token_data.role or UserRole.STUDENT,
    )


async def get_current_staff_user(
    current_user: Annotated[User, Depends(get_current_user)]
) -> User:
    """Get current back-office user (ADMIN or STAFF)."""
    if current_user.disabled or current_user.role not in BACK_OFFICE_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions",
        )
    return current_user


# Dependency aliases for easier use
DbSession = Annotated[AsyncSession, Depends(get_db)]
StaffUser = Annotated[User, Depends(get_current_staff_user)]
