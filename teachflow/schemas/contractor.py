"""
Schemas for contractors
"""

from pydantic import BaseModel, Field
from sqlmodel import SQLModel
from decimal import Decimal
from datetime import datetime
from typing import Optional
import uuid

from teachflow.models.contractor import PaymentFrequency
from teachflow.schemas.user import CURRENCY_PATTERN


class ContactInfo(BaseModel):
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    contact_person: Optional[str] = None


class ContractorCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    contact_info: Optional[ContactInfo] = None
    default_hourly_rate: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    currency: str = Field(default="BRL", pattern=CURRENCY_PATTERN)
    payment_frequency: PaymentFrequency = PaymentFrequency.MONTHLY
    payment_terms_days: int = Field(default=30, ge=0, le=365)
    min_cancellation_notice_hours: int = Field(default=24, ge=0)
    # Fraction of the class value, 0.50 = 50%
    cancellation_penalty_rate: Decimal = Field(default=Decimal("0.00"), ge=0, le=1)
    notes: Optional[str] = None


class ContractorUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    contact_info: Optional[ContactInfo] = None
    default_hourly_rate: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    currency: Optional[str] = Field(default=None, pattern=CURRENCY_PATTERN)
    payment_frequency: Optional[PaymentFrequency] = None
    payment_terms_days: Optional[int] = Field(default=None, ge=0, le=365)
    min_cancellation_notice_hours: Optional[int] = Field(default=None, ge=0)
    cancellation_penalty_rate: Optional[Decimal] = Field(default=None, ge=0, le=1)
    notes: Optional[str] = None


class ContractorRead(SQLModel):
    id: uuid.UUID
    name: str
    contact_info: Optional[dict] = None
    default_hourly_rate: Decimal
    currency: str
    payment_frequency: PaymentFrequency
    payment_terms_days: int
    min_cancellation_notice_hours: int
    cancellation_penalty_rate: Decimal
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class ContractorDetail(ContractorRead):
    student_count: int = 0
    class_count: int = 0
    payment_count: int = 0
