"""
Pydantic schemas for users
"""

from pydantic import AfterValidator, BaseModel, Field, EmailStr
from typing import Annotated, Optional
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import uuid

CURRENCY_PATTERN = r"^[A-Z]{3}$"


def _check_timezone(value: str) -> str:
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone: {value}")
    return value


TimezoneName = Annotated[str, AfterValidator(_check_timezone)]


class UserCreate(BaseModel):
    """User registration schema"""
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    name: str = Field(..., min_length=1, max_length=255)
    phone_number: Optional[str] = Field(default=None, max_length=50)
    timezone: Optional[TimezoneName] = None
    default_currency: Optional[str] = Field(default=None, pattern=CURRENCY_PATTERN)


class UserLogin(BaseModel):
    """User login schema"""
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)


class UserUpdate(BaseModel):
    """Profile settings"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    phone_number: Optional[str] = Field(default=None, max_length=50)
    default_currency: Optional[str] = Field(default=None, pattern=CURRENCY_PATTERN)
    timezone: Optional[TimezoneName] = None


class UserResponse(BaseModel):
    """User response model"""
    id: uuid.UUID
    email: str
    name: str
    phone_number: Optional[str] = None
    default_currency: str
    timezone: str
    created_at: datetime


class PasswordChange(BaseModel):
    """Password change for a logged-in user"""
    current_password: str = Field(..., min_length=1, max_length=72)
    new_password: str = Field(..., min_length=8, max_length=72)
