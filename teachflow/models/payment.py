"""
Payment model
Billing obligations, created on class completion or manually
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import Column, DateTime, Numeric
from decimal import Decimal
from datetime import date, datetime
from typing import Optional
from enum import Enum
import uuid


class PaymentStatus(str, Enum):
    """Status of a payment"""
    PENDING = "pending"           # Awaiting payment
    RECEIVED = "received"         # Money in hand
    CANCELLED = "cancelled"
    OVERDUE = "overdue"


class Payment(SQLModel, table=True):
    """Money owed to the teacher by a contractor"""

    __tablename__ = "payments"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
        description="Owning user (tenant isolation)"
    )

    # At most one payment per class
    class_id: Optional[uuid.UUID] = Field(
        default=None,
        foreign_key="classes.id",
        unique=True,
        nullable=True,
        description="Originating class, null for manual payments"
    )
    student_id: uuid.UUID = Field(foreign_key="students.id", index=True)
    contractor_id: uuid.UUID = Field(foreign_key="contractors.id", index=True)

    amount: Decimal = Field(
        description="Fixed when the payment is created",
        sa_column=Column(Numeric(10, 2), nullable=False)
    )
    currency: str = Field(default="BRL", max_length=3)

    status: PaymentStatus = Field(default=PaymentStatus.PENDING, index=True)
    due_date: date = Field(index=True)
    received_date: Optional[datetime] = Field(default=None, nullable=True, sa_type=DateTime)

    notes: Optional[str] = Field(default=None, max_length=500, nullable=True)

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow, sa_type=DateTime)
    updated_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
