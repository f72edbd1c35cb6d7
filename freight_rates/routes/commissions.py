from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from freight_rates.dependencies import get_commission_ledger
from freight_rates.schemas.commission import (
    CommissionStatusReport,
    CommissionSummary,
    TopPerformers,
)
from freight_rates.services.commission.ledger import CommissionLedger

router = APIRouter(
    prefix="/commissions",
    tags=["commissions"],
)


@router.get("/summary", response_model=CommissionSummary)
async def commission_summary(
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    provider: Optional[str] = None,
    ledger: CommissionLedger = Depends(get_commission_ledger),
):
    return ledger.summarize(start_date, end_date, provider)


@router.get("/top", response_model=TopPerformers)
async def top_performers(
    limit: int = Query(5, ge=1, le=100),
    ledger: CommissionLedger = Depends(get_commission_ledger),
):
    return ledger.top_performers(limit)


@router.get("/export")
async def export_commissions(
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    ledger: CommissionLedger = Depends(get_commission_ledger),
):
    """Download commission records as CSV"""
    csv_text = ledger.export_csv(start_date, end_date)
    filename = f"commissions-{datetime.now(timezone.utc).date().isoformat()}.csv"
    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/status", response_model=CommissionStatusReport)
async def commission_status(ledger: CommissionLedger = Depends(get_commission_ledger)):
    return ledger.status()
