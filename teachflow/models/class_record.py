"""
Class model with status lifecycle
scheduled -> completed | cancelled | no_show
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import Column, DateTime, Numeric
from decimal import Decimal
from datetime import datetime, timedelta
from typing import Optional
from enum import Enum
import uuid


class ClassStatus(str, Enum):
    """Status of a scheduled class"""
    SCHEDULED = "scheduled"       # Initial state
    COMPLETED = "completed"       # Taught, triggers billing
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"           # Student did not attend


class LocationType(str, Enum):
    ONLINE = "online"
    IN_PERSON = "in_person"


class ClassRecord(SQLModel, table=True):
    """A scheduled teaching session"""

    __tablename__ = "classes"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
        description="Owning user (tenant isolation)"
    )
    student_id: uuid.UUID = Field(foreign_key="students.id", index=True)
    contractor_id: uuid.UUID = Field(foreign_key="contractors.id", index=True)

    # Schedule
    start_time: datetime = Field(index=True, sa_type=DateTime, description="Start time (UTC)")
    duration_minutes: int = Field(gt=0)
    end_time: datetime = Field(sa_type=DateTime, description="start_time + duration_minutes")

    status: ClassStatus = Field(default=ClassStatus.SCHEDULED, index=True)

    location_type: LocationType = Field(default=LocationType.ONLINE)
    virtual_meeting_link: Optional[str] = Field(default=None, max_length=500, nullable=True)

    custom_rate: Optional[Decimal] = Field(
        default=None,
        description="Overrides the contractor's default rate when set",
        sa_column=Column(Numeric(10, 2), nullable=True)
    )
    class_notes: Optional[str] = Field(default=None, nullable=True)

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow, sa_type=DateTime)
    updated_at: Optional[datetime] = Field(default=None, sa_type=DateTime)

    @staticmethod
    def compute_end_time(start_time: datetime, duration_minutes: int) -> datetime:
        return start_time + timedelta(minutes=duration_minutes)

    def billing_rate(self, default_rate: Decimal) -> Decimal:
        """Flat per-class charge: custom rate when set, else the given default"""
        if self.custom_rate is not None:
            return self.custom_rate
        return default_rate
