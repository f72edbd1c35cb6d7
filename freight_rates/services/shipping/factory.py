"""
Rate provider factory to make provider selection easy
"""
import logging
from typing import List, Optional

from freight_rates.core.config import Settings, get_settings
from freight_rates.core.enums import ProviderName
from freight_rates.services.shipping.base import BaseRateProvider
from freight_rates.services.shipping.carriers.sandbox import SandboxProvider
from freight_rates.services.shipping.carriers.searates import SeaRatesProvider
from freight_rates.services.shipping.carriers.sendcloud import SendcloudProvider
from freight_rates.services.shipping.carriers.shippo import ShippoProvider

logger = logging.getLogger(__name__)

PROVIDERS = {
    ProviderName.SENDCLOUD.value: SendcloudProvider,
    ProviderName.SHIPPO.value: ShippoProvider,
    ProviderName.SEARATES.value: SeaRatesProvider,
    ProviderName.SANDBOX.value: SandboxProvider,
}

# Live providers, in the order the aggregator calls them
LIVE_PROVIDER_ORDER = [
    ProviderName.SENDCLOUD.value,
    ProviderName.SHIPPO.value,
    ProviderName.SEARATES.value,
]


def get_rate_provider(provider_code: str, **kwargs) -> BaseRateProvider:
    """
    Factory function to get the appropriate rate provider by code

    Args:
        provider_code: The code of the provider to use
        **kwargs: Passed to the provider constructor (credentials, timeout)

    Returns:
        An instance of the appropriate provider class

    Raises:
        ValueError: If the provider code is not supported
    """
    code = (provider_code or "").lower()
    if code not in PROVIDERS:
        raise ValueError(f"Rate provider '{provider_code}' is not supported")

    return PROVIDERS[code](**kwargs)


def get_configured_providers(settings: Optional[Settings] = None) -> List[BaseRateProvider]:
    """
    Providers the aggregator should call.

    Sandbox mode returns only the sandbox provider so fake quotes are never
    mixed with live ones. Otherwise every live provider with credentials.
    """
    settings = settings or get_settings()

    if settings.SHIPPING_SANDBOX_MODE:
        logger.warning("Shipping sandbox mode enabled: quotes are synthetic")
        return [SandboxProvider(settings=settings)]

    providers = []
    for code in LIVE_PROVIDER_ORDER:
        provider = get_rate_provider(code, settings=settings)
        if provider.is_configured:
            providers.append(provider)
        else:
            logger.info(f"{provider.provider_name} not configured, skipping")

    if not providers:
        logger.warning("No rate providers configured")
    return providers
