"""
Sandbox Provider

Synthetic quotes for demos and local development, only enabled by
SHIPPING_SANDBOX_MODE. Every rate is tagged provider="sandbox" and carries
`"sandbox": True` in original_data so it can't pass for a live quote.
"""

from typing import Dict, Any, Optional, List

from freight_rates.core.enums import ProviderName
from freight_rates.schemas.shipping import ShipmentRequest, UnifiedRate
from freight_rates.services.shipping.base import BaseRateProvider


# (carrier, service, price per kg, minimum charge, transit days)
SANDBOX_PARCEL_SERVICES = [
    ("Royal Mail", "Standard Delivery", 2.50, 3.95, 4),
    ("DPD", "Next Day", 4.10, 7.50, 1),
    ("Evri", "Economy", 1.90, 2.99, 5),
]

# Per-container prices, keyed by container size prefix
SANDBOX_FCL_PRICES = {
    "20": 2500.0,
    "40": 4500.0,
}


class SandboxProvider(BaseRateProvider):
    """Deterministic fake quotes, flagged as sandbox data."""

    provider_name = "Sandbox"
    provider_code = ProviderName.SANDBOX.value

    async def _fetch_rates(self, request: ShipmentRequest) -> List[Dict[str, Any]]:
        weight = request.parcel.weight_kg
        quotes = [
            {
                'id': f"{carrier.lower().replace(' ', '-')}-{index}",
                'carrier': carrier,
                'service': service,
                'price': round(max(weight * per_kg, minimum), 2),
                'transit_days': days,
                'currency': 'GBP',
                'sandbox': True,
            }
            for index, (carrier, service, per_kg, minimum, days) in enumerate(SANDBOX_PARCEL_SERVICES)
        ]

        if request.freight is not None:
            container_type = request.freight.container_type.strip().upper()
            quotes.append({
                'id': f"fcl-{container_type.lower()}",
                'carrier': 'Maersk Line',
                'service': f"{container_type} FCL",
                'price': SANDBOX_FCL_PRICES["20"] if "20" in container_type else SANDBOX_FCL_PRICES["40"],
                'transit_days': 28,
                'currency': 'USD',
                'sandbox': True,
            })

        return quotes

    def _parse_rate(self, raw: Dict[str, Any], request: ShipmentRequest) -> Optional[UnifiedRate]:
        return UnifiedRate(
            id=f"sandbox_{raw['id']}",
            provider=self.provider_code,
            carrier_name=raw['carrier'],
            service_name=raw['service'],
            price=raw['price'],
            currency=raw['currency'],
            estimated_days=raw['transit_days'],
            original_data=raw,
        )
