"""
Schemas module
"""

from teachflow.schemas.token import TokenResponse
from teachflow.schemas.user import PasswordChange, UserCreate, UserLogin, UserResponse, UserUpdate

__all__ = [
    "PasswordChange",
    "TokenResponse",
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "UserUpdate",
]
