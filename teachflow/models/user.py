"""
User model - the tenant root every other record is scoped to
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import DateTime
from datetime import datetime
from typing import Optional
import uuid


class User(SQLModel, table=True):
    """Teacher account; its id is the tenant key"""

    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    # Authentication
    email: str = Field(unique=True, index=True, nullable=False, max_length=255)
    password_hash: str = Field(nullable=False)

    # Profile
    name: str = Field(nullable=False, max_length=255)
    phone_number: Optional[str] = Field(default=None, max_length=50, nullable=True)
    default_currency: str = Field(default="BRL", max_length=3)
    timezone: str = Field(default="America/Sao_Paulo", max_length=64)

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow, sa_type=DateTime)
    updated_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
