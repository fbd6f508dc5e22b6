"""
Contractor model
Schools, platforms or private arrangements that pay for classes
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import Column, DateTime, JSON, Numeric
from decimal import Decimal
from datetime import datetime
from typing import Optional
from enum import Enum
import uuid


class PaymentFrequency(str, Enum):
    """How often the contractor settles"""
    WEEKLY = "weekly"
    BI_WEEKLY = "bi_weekly"
    MONTHLY = "monthly"
    PER_CLASS = "per_class"
    CUSTOM = "custom"


class Contractor(SQLModel, table=True):
    """Payer entity with its billing rules"""

    __tablename__ = "contractors"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
        description="Owning user (tenant isolation)"
    )

    name: str = Field(max_length=255)
    contact_info: Optional[dict] = Field(
        default=None,
        description="email, phone, website, contact_person",
        sa_column=Column(JSON, nullable=True)
    )

    # Billing rules
    default_hourly_rate: Decimal = Field(
        description="Rate charged per class unless the class overrides it",
        sa_column=Column(Numeric(10, 2), nullable=False)
    )
    currency: str = Field(default="BRL", max_length=3)
    payment_frequency: PaymentFrequency = Field(default=PaymentFrequency.MONTHLY)
    payment_terms_days: int = Field(
        default=30,
        description="Days between class completion and payment due date"
    )

    # Cancellation policy (stored only, no automatic penalty billing)
    min_cancellation_notice_hours: int = Field(default=24)
    cancellation_penalty_rate: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(5, 2), nullable=False)
    )

    notes: Optional[str] = Field(default=None, nullable=True)

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow, sa_type=DateTime)
    updated_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
