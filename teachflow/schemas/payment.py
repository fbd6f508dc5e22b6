"""
Schemas for payments
"""

from pydantic import BaseModel, Field
from sqlmodel import SQLModel
from decimal import Decimal
from datetime import date, datetime
from typing import Optional
import uuid

from teachflow.models.payment import PaymentStatus
from teachflow.schemas.user import CURRENCY_PATTERN


class PaymentCreate(BaseModel):
    """Manual payment, not tied to a class"""
    student_id: uuid.UUID
    contractor_id: uuid.UUID
    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    currency: Optional[str] = Field(default=None, pattern=CURRENCY_PATTERN)
    due_date: date
    notes: Optional[str] = Field(default=None, max_length=500)


class PaymentStatusUpdate(BaseModel):
    status: PaymentStatus
    received_date: Optional[datetime] = None


class PaymentRead(SQLModel):
    id: uuid.UUID
    class_id: Optional[uuid.UUID] = None
    student_id: uuid.UUID
    contractor_id: uuid.UUID
    amount: Decimal
    currency: str
    status: PaymentStatus
    due_date: date
    received_date: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
