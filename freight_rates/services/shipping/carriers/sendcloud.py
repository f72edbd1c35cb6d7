"""
Sendcloud Provider Implementation

European parcel rates through the Sendcloud shipping-price endpoint.
Authentication is HTTP basic with the integration's public/secret key pair.
Parcels are sent in kg / cm as Sendcloud expects.

Sendcloud API Docs:
 - https://api.sendcloud.dev/docs/sendcloud-public-api/shipping-products
"""

import logging
from typing import Dict, Any, Optional, List

from freight_rates.core.enums import ProviderName
from freight_rates.core.exceptions import ProviderAPIError
from freight_rates.schemas.shipping import Address, ShipmentRequest, UnifiedRate
from freight_rates.services.shipping.base import BaseRateProvider
from freight_rates.services.shipping.payload_builder import (
    coerce_price,
    estimate_days_from_date,
)

logger = logging.getLogger(__name__)


class SendcloudProvider(BaseRateProvider):
    """Sendcloud parcel rates."""

    provider_name = "Sendcloud"
    provider_code = ProviderName.SENDCLOUD.value

    def __init__(
        self,
        public_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        base_url: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.public_key = public_key if public_key is not None else self.settings.SENDCLOUD_PUBLIC_KEY
        self.secret_key = secret_key if secret_key is not None else self.settings.SENDCLOUD_SECRET_KEY
        self.base_url = (base_url or self.settings.SENDCLOUD_BASE_URL).rstrip('/')

    @property
    def is_configured(self) -> bool:
        return bool(self.public_key and self.secret_key)

    def build_address(self, address: Address) -> Dict[str, Any]:
        return {
            'name': address.name,
            'company': address.company,
            'address': address.street1,
            'address_2': address.street2,
            'city': address.city,
            'postal_code': address.postal_code,
            'country': self.country_for(address),
            'telephone': address.phone,
            'email': address.email,
        }

    def build_payload(self, request: ShipmentRequest) -> Dict[str, Any]:
        parcel = request.parcel
        payload_parcel = {
            'weight': round(parcel.weight_kg, 3),
            'value': parcel.declared_value,
            'description': parcel.description,
        }
        # Sendcloud takes whole centimetres
        for key, value in (('length', parcel.length_cm), ('width', parcel.width_cm), ('height', parcel.height_cm)):
            if value is not None:
                payload_parcel[key] = int(value)

        return {
            'from_address': self.build_address(request.sender),
            'to_address': self.build_address(request.recipient),
            'parcel': payload_parcel,
        }

    async def _fetch_rates(self, request: ShipmentRequest) -> List[Dict[str, Any]]:
        result = await self._make_request(
            'POST',
            f"{self.base_url}/shipping-price",
            headers={
                'Content-Type': 'application/json',
                'Accept': 'application/json',
            },
            data=self.build_payload(request),
            auth=(self.public_key, self.secret_key),
        )
        if not isinstance(result, dict):
            raise ProviderAPIError(self.provider_code, "Unexpected response body")

        errors = result.get('errors') or []
        if errors:
            logger.warning(f"Sendcloud returned errors: {errors}")

        return result.get('shipping_methods') or []

    def _parse_rate(self, raw: Dict[str, Any], request: ShipmentRequest) -> Optional[UnifiedRate]:
        price = coerce_price(raw.get('price'))
        if price is None:
            return None

        delivery_date = raw.get('estimated_delivery_date')
        return UnifiedRate(
            id=f"sendcloud_{raw['id']}",
            provider=self.provider_code,
            carrier_name=raw.get('carrier') or raw.get('carrier_name') or 'Unknown Carrier',
            service_name=raw.get('name') or raw.get('service_name') or 'Standard Service',
            price=price,
            currency=raw.get('currency') or 'EUR',
            estimated_days=estimate_days_from_date(delivery_date),
            estimated_delivery_date=delivery_date,
            original_data=raw,
        )
