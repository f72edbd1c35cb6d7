"""
SeaRates Provider Implementation

Full-container-load (FCL) ocean rates. Unlike the parcel providers this one
quotes port to port, so the ShipmentRequest must carry FreightDetails
(origin/destination UN/LOCODE and container type).

The response shape varies between contracts: rates may come under `rates`
or as a bare list, and price / carrier / transit fields go by several names.
"""

import logging
from typing import Dict, Any, Optional, List

from freight_rates.core.enums import ProviderName
from freight_rates.core.exceptions import ProviderAPIError, InvalidShipmentError
from freight_rates.schemas.shipping import ShipmentRequest, UnifiedRate
from freight_rates.services.shipping.base import BaseRateProvider
from freight_rates.services.shipping.payload_builder import (
    FALLBACK_TRANSIT_DAYS,
    coerce_days,
    coerce_price,
)

logger = logging.getLogger(__name__)


class SeaRatesProvider(BaseRateProvider):
    """SeaRates FCL ocean freight rates."""

    provider_name = "SeaRates"
    provider_code = ProviderName.SEARATES.value

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.api_key = api_key if api_key is not None else self.settings.SEARATES_API_KEY
        self.base_url = (base_url or self.settings.SEARATES_BASE_URL).rstrip('/')

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def validate_request(self, request: ShipmentRequest) -> None:
        # Port-to-port: postal addresses aren't needed, the freight leg is
        freight = request.freight
        if freight is None:
            raise InvalidShipmentError("FCL quote needs freight details")
        missing = [
            name for name in ('origin_port', 'destination_port', 'container_type')
            if not getattr(freight, name).strip()
        ]
        if missing:
            raise InvalidShipmentError(f"freight details missing {', '.join(missing)}")

    def build_payload(self, request: ShipmentRequest) -> Dict[str, Any]:
        freight = request.freight
        return {
            'origin': freight.origin_port.strip().upper(),
            'destination': freight.destination_port.strip().upper(),
            'container_type': freight.container_type.strip().upper(),
            'weight': freight.total_weight_ton or 1,
        }

    async def _fetch_rates(self, request: ShipmentRequest) -> List[Dict[str, Any]]:
        result = await self._make_request(
            'POST',
            f"{self.base_url}/fcl/rates",
            headers={
                'Authorization': f'Bearer {self.api_key}',
                'Content-Type': 'application/json',
            },
            data=self.build_payload(request),
        )
        if isinstance(result, dict):
            return result.get('rates') or []
        if isinstance(result, list):
            return result
        raise ProviderAPIError(self.provider_code, "Unexpected response body")

    def _parse_rate(self, raw: Dict[str, Any], request: ShipmentRequest) -> Optional[UnifiedRate]:
        price = coerce_price(raw.get('total') if raw.get('total') is not None else raw.get('price'))
        if price is None:
            return None

        transit = raw.get('transit_time') or raw.get('transit') or raw.get('tt')
        estimated_days = coerce_days(transit) or FALLBACK_TRANSIT_DAYS
        container_type = request.freight.container_type.strip().upper()
        rate_ref = raw.get('id') or raw.get('rate_id') or f"{raw.get('carrier') or raw.get('line') or 'rate'}_{price}"

        return UnifiedRate(
            id=f"searates_{rate_ref}",
            provider=self.provider_code,
            carrier_name=raw.get('carrier') or raw.get('line') or 'Unknown Carrier',
            service_name=f"{container_type} FCL",
            price=price,
            currency=raw.get('currency') or 'USD',
            estimated_days=estimated_days,
            original_data=raw,
        )
