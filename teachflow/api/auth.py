"""
Authentication and profile API endpoints
"""

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from teachflow.api.responses import unwrap
from teachflow.core.context import Caller
from teachflow.core.database import get_session
from teachflow.core.dependencies import get_current_caller, get_current_user
from teachflow.models import User
from teachflow.schemas.token import TokenResponse
from teachflow.schemas.user import PasswordChange, UserCreate, UserLogin, UserResponse, UserUpdate
from teachflow.services import accounts

router = APIRouter()


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    user_data: UserCreate,
    session: Session = Depends(get_session)
):
    """Register a new teacher account"""
    result = accounts.register_user(session, user_data)
    user = unwrap(result)
    return TokenResponse(access_token=result.extras["access_token"], user_id=str(user.id))


@router.post("/login", response_model=TokenResponse)
def login_user(
    login_data: UserLogin,
    session: Session = Depends(get_session)
):
    """Exchange credentials for a bearer token"""
    result = accounts.authenticate(session, login_data)
    user = unwrap(result)
    return TokenResponse(access_token=result.extras["access_token"], user_id=str(user.id))


@router.get("/me", response_model=UserResponse)
def read_profile(user: User = Depends(get_current_user)):
    return UserResponse.model_validate(user, from_attributes=True)


@router.put("/me", response_model=UserResponse)
def update_profile(
    profile_data: UserUpdate,
    caller: Caller = Depends(get_current_caller),
    session: Session = Depends(get_session)
):
    """Update name, phone, default currency or timezone"""
    user = unwrap(accounts.update_profile(session, caller, profile_data))
    return UserResponse.model_validate(user, from_attributes=True)


@router.put("/me/password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    password_data: PasswordChange,
    caller: Caller = Depends(get_current_caller),
    session: Session = Depends(get_session)
):
    """Change password; the current one must be supplied"""
    unwrap(accounts.change_password(session, caller, password_data))
