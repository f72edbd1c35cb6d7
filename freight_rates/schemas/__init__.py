from .shipping import (
    Address,
    Parcel,
    FreightDetails,
    ShipmentRequest,
    UnifiedRate,
    RateComparison,
    RateCommissionSummary,
)
from .commission import (
    CustomerContext,
    CommissionRecord,
    BreakdownEntry,
    DailyTrend,
    CommissionSummary,
    Performer,
    TopPerformers,
    CommissionStatusReport,
    RateSelection,
)
