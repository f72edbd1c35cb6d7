"""
Base Rate Provider Interface

This module defines the abstract base class that all rate provider
implementations must implement.

Each provider implementation supplies:
- request validation (what it needs before calling out)
- the outbound call (`_fetch_rates`) returning the raw rate dicts
- parsing of one raw rate into a UnifiedRate (`_parse_rate`)

`get_rates` wraps those steps and never raises: a timeout, transport error,
non-2xx status or malformed body is logged and turned into an empty list so
the aggregator can carry on with the other providers.
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List

import httpx

from freight_rates.core.config import Settings, get_settings
from freight_rates.core.exceptions import ProviderAPIError, InvalidShipmentError
from freight_rates.schemas.shipping import ShipmentRequest, UnifiedRate
from freight_rates.services.shipping.payload_builder import (
    missing_address_fields,
    resolve_country,
)

logger = logging.getLogger(__name__)


class BaseRateProvider(ABC):
    """Base class for all rate providers"""

    provider_name = "Generic Provider"
    provider_code = "generic"

    def __init__(
        self,
        timeout: Optional[float] = None,
        default_country: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize the provider

        Args:
            timeout: Deadline in seconds for one get_rates call
            default_country: Country used when none is given or inferable
            settings: Settings to read credentials from (defaults to get_settings())
        """
        self.settings = settings = settings or get_settings()
        self.timeout = timeout if timeout is not None else settings.PROVIDER_TIMEOUT_SECONDS
        self.default_country = default_country or settings.DEFAULT_COUNTRY_CODE

    @property
    def is_configured(self) -> bool:
        """Whether credentials for this provider are present"""
        return True

    async def get_rates(self, request: ShipmentRequest) -> List[UnifiedRate]:
        """Get unified rates for a shipment, or [] on any failure

        Args:
            request: Shipment to quote

        Returns:
            Rates with a positive price, tagged with this provider
        """
        try:
            self.validate_request(request)
        except InvalidShipmentError as e:
            logger.warning(f"{self.provider_name}: rejected shipment request: {e}")
            return []

        try:
            raw_rates = await asyncio.wait_for(self._fetch_rates(request), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"{self.provider_name}: no response within {self.timeout}s")
            return []
        except ProviderAPIError as e:
            logger.error(f"{self.provider_name} rates failed: {e}")
            return []
        except Exception:
            logger.exception(f"{self.provider_name}: unexpected error fetching rates")
            return []

        if not isinstance(raw_rates, list):
            logger.error(f"{self.provider_name}: malformed rates payload ({type(raw_rates).__name__})")
            return []

        rates = []
        for raw in raw_rates:
            try:
                rate = self._parse_rate(raw, request)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.debug(f"{self.provider_name}: skipping unparseable rate: {e}")
                continue
            if rate is None or rate.price <= 0:
                continue
            rates.append(rate)

        logger.info(f"{self.provider_name}: {len(rates)} rates")
        return rates

    def validate_request(self, request: ShipmentRequest) -> None:
        """Raise InvalidShipmentError if the request can't be quoted

        Args:
            request: Shipment to check
        """
        for role, address in (("sender", request.sender), ("recipient", request.recipient)):
            missing = missing_address_fields(address)
            if missing:
                raise InvalidShipmentError(f"{role} address missing {', '.join(missing)}")

    def country_for(self, address) -> str:
        return resolve_country(address, self.default_country)

    @abstractmethod
    async def _fetch_rates(self, request: ShipmentRequest) -> List[Dict[str, Any]]:
        """Call the provider and return its raw rate dicts

        Raises:
            ProviderAPIError: If the provider call fails
        """
        pass

    @abstractmethod
    def _parse_rate(self, raw: Dict[str, Any], request: ShipmentRequest) -> Optional[UnifiedRate]:
        """Convert one raw provider rate; return None to drop it"""
        pass

    async def _make_request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        data: Optional[Dict] = None,
        params: Optional[Dict] = None,
        auth: Optional[tuple] = None,
    ) -> Any:
        """
        Make a request to the provider API

        Returns:
            Decoded JSON body

        Raises:
            ProviderAPIError: On network error, timeout, non-2xx or non-JSON body
        """
        logger.debug(f"{self.provider_name}: {method} {url}")
        if data:
            logger.debug(f"Data: {json.dumps(data)[:500]}...")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=headers,
                    json=data,
                    params=params,
                    auth=auth,
                )
        except httpx.TimeoutException as e:
            raise ProviderAPIError(self.provider_code, f"Request timed out: {str(e)}")
        except httpx.RequestError as e:
            raise ProviderAPIError(self.provider_code, f"Network error: {str(e)}")

        if not 200 <= response.status_code < 300:
            raise ProviderAPIError(
                self.provider_code,
                f"Request failed with status {response.status_code}: {response.text[:500]}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderAPIError(self.provider_code, f"Invalid JSON body: {str(e)}")
