"""
Student model with optional prepaid package
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import Column, DateTime, JSON
from datetime import datetime
from typing import Optional
from enum import Enum
import uuid


class StudentStatus(str, Enum):
    """Lifecycle of a learner"""
    ACTIVE = "active"
    INACTIVE = "inactive"
    PAUSED = "paused"
    LEAD = "lead"
    ARCHIVED = "archived"


class Student(SQLModel, table=True):
    """Learner, either tied to a contractor or private (no contractor)"""

    __tablename__ = "students"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
        description="Owning user (tenant isolation)"
    )
    contractor_id: Optional[uuid.UUID] = Field(
        default=None,
        foreign_key="contractors.id",
        index=True,
        nullable=True,
        description="Null for private students"
    )

    name: str = Field(max_length=255)
    email: Optional[str] = Field(default=None, max_length=255, nullable=True)
    phone_number: Optional[str] = Field(default=None, max_length=50, nullable=True)
    native_language: Optional[str] = Field(default=None, max_length=100, nullable=True)
    proficiency_level: Optional[str] = Field(default=None, max_length=10, nullable=True)
    learning_goals: Optional[str] = Field(default=None, nullable=True)
    notes: Optional[str] = Field(default=None, nullable=True)

    status: StudentStatus = Field(default=StudentStatus.ACTIVE, index=True)

    # total_classes, remaining_classes, value_per_package, currency,
    # expires_at, classes_per_week
    package_details: Optional[dict] = Field(
        default=None,
        sa_column=Column(JSON, nullable=True)
    )

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow, sa_type=DateTime)
    updated_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
