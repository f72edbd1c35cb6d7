from fastapi import APIRouter, Depends

from freight_rates.dependencies import get_commission_ledger, get_rate_aggregator
from freight_rates.schemas.commission import CommissionRecord, RateSelection
from freight_rates.schemas.shipping import RateComparison, ShipmentRequest
from freight_rates.services.commission.ledger import CommissionLedger
from freight_rates.services.shipping.aggregator import RateAggregator

router = APIRouter(
    prefix="/shipping",
    tags=["shipping"],
    responses={404: {"description": "Not found"}},
)


@router.post("/rates", response_model=RateComparison)
async def get_rates_endpoint(
    shipment: ShipmentRequest,
    aggregator: RateAggregator = Depends(get_rate_aggregator),
):
    """Compare rates across all providers.

    An empty all_rates list means no quotes are available; it is not an error.
    """
    return await aggregator.get_best_rates(shipment)


@router.post("/rates/select", response_model=CommissionRecord, status_code=201)
async def select_rate_endpoint(
    selection: RateSelection,
    ledger: CommissionLedger = Depends(get_commission_ledger),
):
    """Customer confirmed a rate: record the commission once."""
    return ledger.record(selection.rate, selection.customer)
