"""
Account registration, login and profile settings
"""

from datetime import datetime
from typing import Any

from sqlmodel import Session, select
import structlog

from teachflow.core.auth import create_access_token, hash_password, verify_password
from teachflow.core.config import get_settings
from teachflow.core.context import Caller
from teachflow.core.errors import AlreadyExistsError, NotFoundError, UnauthenticatedError, ValidationFailure
from teachflow.models import User
from teachflow.schemas.user import PasswordChange, UserCreate, UserLogin, UserUpdate
from teachflow.services.base import ActionResult, action, parse

logger = structlog.get_logger(__name__)
settings = get_settings()

REQUIRED_PROFILE_FIELDS = ("name", "default_currency", "timezone")


@action("register user", authenticated=False)
def register_user(session: Session, data: Any) -> ActionResult:
    """Create an account; ``extras["access_token"]`` logs it straight in"""
    payload = parse(UserCreate, data)
    email = payload.email.lower()

    existing_user = session.exec(select(User).where(User.email == email)).first()
    if existing_user:
        raise AlreadyExistsError("Email already registered")

    user = User(
        email=email,
        password_hash=hash_password(payload.password),
        name=payload.name,
        phone_number=payload.phone_number or None,
        timezone=payload.timezone or settings.DEFAULT_TIMEZONE,
        default_currency=payload.default_currency or settings.DEFAULT_CURRENCY,
    )
    session.add(user)
    session.commit()
    session.refresh(user)

    logger.info(f"User registered: {user.id}")
    return ActionResult.ok(user, access_token=create_access_token(user.id, user.email))


@action("log in", authenticated=False)
def authenticate(session: Session, data: Any) -> ActionResult:
    payload = parse(UserLogin, data)

    user = session.exec(select(User).where(User.email == payload.email.lower())).first()
    # Same message for unknown email and wrong password
    if user is None or not verify_password(payload.password, user.password_hash):
        raise UnauthenticatedError("Invalid email or password")

    logger.info(f"User logged in: {user.id}")
    return ActionResult.ok(user, access_token=create_access_token(user.id, user.email))


@action("update profile")
def update_profile(session: Session, caller: Caller, data: Any) -> User:
    payload = parse(UserUpdate, data)

    user = session.get(User, caller.id)
    if user is None:
        raise NotFoundError("User not found")

    for key, value in payload.model_dump(exclude_unset=True).items():
        # Optional fields may be cleared; required ones ignore null
        if value is None and key in REQUIRED_PROFILE_FIELDS:
            continue
        setattr(user, key, value)

    user.updated_at = datetime.utcnow()
    session.add(user)
    session.commit()
    session.refresh(user)

    logger.info(f"Profile updated: {user.id}")
    return user


@action("change password")
def change_password(session: Session, caller: Caller, data: Any) -> None:
    """Replace the caller's password after checking the current one"""
    payload = parse(PasswordChange, data)

    user = session.get(User, caller.id)
    if user is None:
        raise NotFoundError("User not found")
    if not verify_password(payload.current_password, user.password_hash):
        raise ValidationFailure("Current password is incorrect")

    user.password_hash = hash_password(payload.new_password)
    user.updated_at = datetime.utcnow()
    session.add(user)
    session.commit()

    logger.info(f"Password changed: {user.id}")
