from fastapi import Request

from freight_rates.services.commission.ledger import CommissionLedger
from freight_rates.services.shipping.aggregator import RateAggregator


def get_rate_aggregator(request: Request) -> RateAggregator:
    """Dependency for the aggregator built at startup."""
    return request.app.state.rate_aggregator


def get_commission_ledger(request: Request) -> CommissionLedger:
    """Dependency for the process-wide commission ledger."""
    return request.app.state.commission_ledger
