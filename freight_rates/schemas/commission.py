"""
Schemas for the commission ledger and its derived analytics.
"""

from datetime import datetime
from typing import Optional, List, Dict
from pydantic import Field

from freight_rates.core.enums import CommissionHealth
from freight_rates.schemas.base import BaseSchema, FrozenSchema
from freight_rates.schemas.shipping import UnifiedRate


class CustomerContext(BaseSchema):
    """Booking details supplied when a customer confirms a rate"""
    email: Optional[str] = None
    shipment_id: Optional[str] = None
    route: Optional[str] = None


class RateSelection(BaseSchema):
    """Body of the 'customer confirmed this rate' callback"""
    rate: UnifiedRate
    customer: CustomerContext = Field(default_factory=CustomerContext)


class CommissionRecord(FrozenSchema):
    """One realized commission. Never modified once written."""
    id: str
    timestamp: datetime  # UTC
    provider: str
    carrier_name: str
    service_name: str
    customer_price: float
    commission: float
    commission_percentage: float
    currency: str
    shipment_id: Optional[str] = None
    customer_email: Optional[str] = None
    route: str = "Unknown"


class BreakdownEntry(BaseSchema):
    commission: float = 0.0
    revenue: float = 0.0
    count: int = 0
    average_commission: float = 0.0


class DailyTrend(BaseSchema):
    date: str  # YYYY-MM-DD
    commission: float = 0.0
    revenue: float = 0.0
    count: int = 0


class CommissionSummary(BaseSchema):
    total_commission: float = 0.0
    total_revenue: float = 0.0
    average_margin: float = 0.0
    transaction_count: int = 0
    by_provider: Dict[str, BreakdownEntry] = Field(default_factory=dict)
    by_carrier: Dict[str, BreakdownEntry] = Field(default_factory=dict)
    daily_trends: List[DailyTrend] = Field(default_factory=list)


class Performer(BaseSchema):
    name: str
    commission: float
    count: int


class TopPerformers(BaseSchema):
    top_providers: List[Performer] = Field(default_factory=list)
    top_carriers: List[Performer] = Field(default_factory=list)


class CommissionStatusReport(BaseSchema):
    is_tracking: bool
    total_records: int
    last_record: Optional[CommissionRecord] = None
    average_daily_commission: float
    status: CommissionHealth
