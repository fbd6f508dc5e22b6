"""
Authentication dependencies for FastAPI
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session
from typing import Optional
import uuid
import structlog

from teachflow.core.auth import verify_token
from teachflow.core.context import Caller
from teachflow.core.database import get_session
from teachflow.models.user import User

logger = structlog.get_logger(__name__)
security = HTTPBearer(auto_error=False)


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> uuid.UUID:
    """Get current user ID from JWT token"""
    if credentials is None:
        raise _credentials_exception()

    user_id = verify_token(credentials.credentials)
    if user_id is None:
        raise _credentials_exception()

    logger.debug(f"User authenticated: {user_id}")
    return user_id


def get_current_user(
    user_id: uuid.UUID = Depends(get_current_user_id),
    session: Session = Depends(get_session)
) -> User:
    """Load the authenticated user row"""
    user = session.get(User, user_id)
    if user is None:
        # Token outlived its account
        raise _credentials_exception()
    return user


def get_current_caller(user: User = Depends(get_current_user)) -> Caller:
    """Resolve the caller context handed to service operations"""
    return Caller.from_user(user)
