"""
Schemas for dashboard aggregates
"""

from pydantic import BaseModel
from decimal import Decimal
from typing import List
import uuid


class ContractorTotal(BaseModel):
    contractor_id: uuid.UUID
    total: Decimal


class FinancialSummary(BaseModel):
    total_received: Decimal
    total_pending: Decimal
    by_contractor: List[ContractorTotal]


class DashboardOverview(BaseModel):
    classes_today: int
    active_students: int
    month_revenue: Decimal
    currency: str
