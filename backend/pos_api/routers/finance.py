"""
Finance router - /api/finance/*
Revenue figures derived from the order set on every request.
"""

from datetime import date

from fastapi import APIRouter, Depends

from pos_api.core.dependencies import get_finance_service
from pos_api.services.domain import FinanceService
from pos_shared.utils.schemas import RevenueSummaryOutput, ShiftReportOutput

router = APIRouter(prefix="/api/finance", tags=["finance"])


@router.get("/summary", response_model=RevenueSummaryOutput)
def revenue_summary(
    day: date | None = None,
    service: FinanceService = Depends(get_finance_service),
) -> RevenueSummaryOutput:
    """Revenue of non-cancelled orders, overall or for one day."""
    return RevenueSummaryOutput.from_summary(service.summary(day), day)


@router.get("/handover", response_model=ShiftReportOutput)
def shift_handover(
    day: date | None = None,
    service: FinanceService = Depends(get_finance_service),
) -> ShiftReportOutput:
    """Completed orders of a day grouped by payment method (defaults to today)."""
    return ShiftReportOutput.from_report(service.handover(day))
