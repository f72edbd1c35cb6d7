"""
Shippo Provider Implementation

Shippo aggregates many parcel carriers behind one shipment endpoint, which
makes it a good source for rate comparison. A synchronous shipment create
(`async: false`) returns every available rate in the response.

Parcels are sent in imperial units (lb / in), converted from the metric
ShipmentRequest.

Shippo API Docs:
 - https://docs.goshippo.com/docs/guides_general/rating_quickstart
 - https://docs.goshippo.com/shippoapi/public-api/shipments/createshipment
"""

import logging
from typing import Dict, Any, Optional, List

from freight_rates.core.enums import ProviderName
from freight_rates.core.exceptions import ProviderAPIError
from freight_rates.schemas.shipping import Address, ShipmentRequest, UnifiedRate
from freight_rates.services.shipping.base import BaseRateProvider
from freight_rates.services.shipping.payload_builder import (
    FALLBACK_TRANSIT_DAYS,
    cm_to_in,
    coerce_days,
    coerce_price,
    kg_to_lb,
    parcel_dimensions_cm,
)

logger = logging.getLogger(__name__)


class ShippoProvider(BaseRateProvider):
    """Shippo multi-carrier parcel rates."""

    provider_name = "Shippo"
    provider_code = ProviderName.SHIPPO.value

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, **kwargs):
        """Initialize the Shippo provider.

        Args:
            api_key: Shippo API token (defaults to SHIPPO_API_KEY)
            base_url: API root (defaults to SHIPPO_BASE_URL)
        """
        super().__init__(**kwargs)
        self.api_key = api_key if api_key is not None else self.settings.SHIPPO_API_KEY
        self.base_url = (base_url or self.settings.SHIPPO_BASE_URL).rstrip('/')

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _get_headers(self) -> Dict[str, str]:
        return {
            'Authorization': f'ShippoToken {self.api_key}',
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        }

    def build_address(self, address: Address) -> Dict[str, Any]:
        payload = {
            'name': address.name,
            'street1': address.street1,
            'city': address.city,
            'zip': address.postal_code,
            'country': self.country_for(address),
        }
        # Shippo rejects empty strings for optional fields
        optional = {
            'company': address.company,
            'street2': address.street2,
            'state': address.state,
            'phone': address.phone,
            'email': address.email,
        }
        payload.update({key: value for key, value in optional.items() if value})
        return payload

    def build_payload(self, request: ShipmentRequest) -> Dict[str, Any]:
        """Shipment payload with the parcel converted to lb / in"""
        dimensions = parcel_dimensions_cm(request.parcel)
        return {
            'address_from': self.build_address(request.sender),
            'address_to': self.build_address(request.recipient),
            'parcels': [
                {
                    'length': cm_to_in(dimensions['length']),
                    'width': cm_to_in(dimensions['width']),
                    'height': cm_to_in(dimensions['height']),
                    'distance_unit': 'in',
                    'weight': kg_to_lb(request.parcel.weight_kg),
                    'mass_unit': 'lb',
                }
            ],
            'async': False,
        }

    async def _fetch_rates(self, request: ShipmentRequest) -> List[Dict[str, Any]]:
        result = await self._make_request(
            'POST',
            f"{self.base_url}/shipments/",
            headers=self._get_headers(),
            data=self.build_payload(request),
        )
        if not isinstance(result, dict):
            raise ProviderAPIError(self.provider_code, "Unexpected response body")

        messages = result.get('messages') or []
        if messages:
            logger.debug(f"Shippo messages: {messages}")

        return result.get('rates') or []

    def _parse_rate(self, raw: Dict[str, Any], request: ShipmentRequest) -> Optional[UnifiedRate]:
        price = coerce_price(raw.get('amount'))
        if price is None:
            return None

        servicelevel = raw.get('servicelevel') or {}
        # duration_terms is free text, e.g. "Delivery in 1 to 3 business days."
        estimated_days = coerce_days(raw.get('estimated_days'))
        if estimated_days is None:
            estimated_days = coerce_days(raw.get('duration_terms')) or FALLBACK_TRANSIT_DAYS

        return UnifiedRate(
            id=f"shippo_{raw['object_id']}",
            provider=self.provider_code,
            carrier_name=raw.get('provider') or 'Unknown Carrier',
            service_name=servicelevel.get('name') or 'Standard Service',
            price=price,
            currency=raw.get('currency') or 'USD',
            estimated_days=estimated_days,
            original_data=raw,
        )
