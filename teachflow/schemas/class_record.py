"""
Schemas for classes
"""

from pydantic import BaseModel, Field
from sqlmodel import SQLModel
from decimal import Decimal
from datetime import datetime
from typing import List, Optional
import uuid

from teachflow.models.class_record import ClassStatus, LocationType
from teachflow.schemas.payment import PaymentRead


class ClassCreate(BaseModel):
    student_id: uuid.UUID
    contractor_id: uuid.UUID
    start_time: datetime
    duration_minutes: int = Field(..., gt=0, le=24 * 60)
    location_type: LocationType = LocationType.ONLINE
    virtual_meeting_link: Optional[str] = Field(default=None, max_length=500)
    custom_rate: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    class_notes: Optional[str] = None


class ClassStatusUpdate(BaseModel):
    status: ClassStatus
    class_notes: Optional[str] = None


class ClassRead(SQLModel):
    id: uuid.UUID
    student_id: uuid.UUID
    contractor_id: uuid.UUID
    start_time: datetime
    duration_minutes: int
    end_time: datetime
    status: ClassStatus
    location_type: LocationType
    virtual_meeting_link: Optional[str] = None
    custom_rate: Optional[Decimal] = None
    class_notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class ClassStatusResponse(BaseModel):
    """Updated class plus the payment its completion produced"""
    class_record: ClassRead
    payment: Optional[PaymentRead] = None
    warnings: List[str] = []
