"""
Schemas for students and their prepaid packages
"""

from pydantic import BaseModel, Field, model_validator
from sqlmodel import SQLModel
from decimal import Decimal
from datetime import date, datetime
from typing import List, Optional
import uuid

from teachflow.models.student import StudentStatus
from teachflow.schemas.class_record import ClassRead
from teachflow.schemas.payment import PaymentRead
from teachflow.schemas.user import CURRENCY_PATTERN


class PackageDetails(BaseModel):
    """Prepaid bundle of classes"""
    total_classes: int = Field(..., gt=0)
    remaining_classes: Optional[int] = Field(default=None, ge=0)
    value_per_package: Decimal = Field(..., ge=0)
    currency: str = Field(default="BRL", pattern=CURRENCY_PATTERN)
    expires_at: Optional[date] = None
    classes_per_week: Optional[int] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def check_remaining(self):
        # A new package starts full
        if self.remaining_classes is None:
            self.remaining_classes = self.total_classes
        if self.remaining_classes > self.total_classes:
            raise ValueError("remaining_classes cannot exceed total_classes")
        return self


class StudentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    phone_number: Optional[str] = Field(default=None, max_length=50)
    native_language: Optional[str] = Field(default=None, max_length=100)
    proficiency_level: Optional[str] = Field(default=None, max_length=10)
    contractor_id: Optional[uuid.UUID] = None
    status: StudentStatus = StudentStatus.ACTIVE
    learning_goals: Optional[str] = None
    notes: Optional[str] = None
    package_details: Optional[PackageDetails] = None


class StudentUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    phone_number: Optional[str] = Field(default=None, max_length=50)
    native_language: Optional[str] = Field(default=None, max_length=100)
    proficiency_level: Optional[str] = Field(default=None, max_length=10)
    contractor_id: Optional[uuid.UUID] = None
    status: Optional[StudentStatus] = None
    learning_goals: Optional[str] = None
    notes: Optional[str] = None
    package_details: Optional[PackageDetails] = None


class StudentRead(SQLModel):
    id: uuid.UUID
    contractor_id: Optional[uuid.UUID] = None
    name: str
    email: Optional[str] = None
    phone_number: Optional[str] = None
    native_language: Optional[str] = None
    proficiency_level: Optional[str] = None
    status: StudentStatus
    learning_goals: Optional[str] = None
    notes: Optional[str] = None
    package_details: Optional[dict] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class StudentDetail(StudentRead):
    class_count: int = 0
    payment_count: int = 0
    recent_classes: List[ClassRead] = []
    recent_payments: List[PaymentRead] = []
