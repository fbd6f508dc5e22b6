"""
Dashboard API endpoints
"""

from fastapi import APIRouter, Depends
from sqlmodel import Session
from datetime import date

from teachflow.api.responses import unwrap
from teachflow.core.context import Caller
from teachflow.core.database import get_session
from teachflow.core.dependencies import get_current_caller
from teachflow.schemas.dashboard import DashboardOverview, FinancialSummary
from teachflow.services import dashboard

router = APIRouter()


@router.get("/", response_model=DashboardOverview)
def get_overview(
    caller: Caller = Depends(get_current_caller),
    session: Session = Depends(get_session)
):
    return unwrap(dashboard.get_overview(session, caller))


@router.get("/financial-summary", response_model=FinancialSummary)
def get_financial_summary(
    start: date,
    end: date,
    caller: Caller = Depends(get_current_caller),
    session: Session = Depends(get_session)
):
    """Received in [start, end], plus everything past due today"""
    return unwrap(dashboard.get_financial_summary(session, caller, start, end))
