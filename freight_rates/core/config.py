# freight_rates/core/config.py

import os
from functools import lru_cache
from typing import Dict, Annotated
from pydantic import ConfigDict, BeforeValidator
from pydantic_settings import BaseSettings


DEFAULT_COMMISSION_RULES = {
    "sendcloud": {"percentage": 5.0, "fixed_fee": 0.50},
    "shippo": {"percentage": 4.5, "fixed_fee": 0.30},
    "default": {"percentage": 5.0, "fixed_fee": 0.50},
}


def _upper_country(value):
    if not value:
        return "GB"
    return str(value).strip().upper()


class Settings(BaseSettings):
    """
    Application settings.
    Loads values from environment variables (.env file)
    """
    # Shippo API
    SHIPPO_API_KEY: str = ""
    SHIPPO_BASE_URL: str = "https://api.goshippo.com"

    # Sendcloud API
    SENDCLOUD_PUBLIC_KEY: str = ""
    SENDCLOUD_SECRET_KEY: str = ""
    SENDCLOUD_BASE_URL: str = "https://panel.sendcloud.sc/api/v2"

    # SeaRates API (FCL)
    SEARATES_API_KEY: str = ""
    SEARATES_BASE_URL: str = "https://api.searates.com"

    # Rate fetching
    PROVIDER_TIMEOUT_SECONDS: float = 15.0
    DEFAULT_COUNTRY_CODE: Annotated[str, BeforeValidator(_upper_country)] = "GB"
    SHIPPING_SANDBOX_MODE: bool = False  # Synthetic quotes only, never mixed with live ones

    # Commission: provider -> {"percentage": float, "fixed_fee": float}, must include "default"
    COMMISSION_RULES: Dict[str, Dict[str, float]] = DEFAULT_COMMISSION_RULES

    # Commission ledger storage
    COMMISSION_STORAGE_BACKEND: str = "json"  # memory | json | sql
    COMMISSION_STORAGE_PATH: str = "data/commission_records.json"
    COMMISSION_DATABASE_URL: str = "sqlite:///data/commissions.db"

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    model_config = ConfigDict(
        env_file=os.environ.get('ENV_FILE', '.env') if os.path.exists(os.environ.get('ENV_FILE', '.env')) else None,
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings():
    """Cached settings to avoid loading .env file for every request"""
    return Settings()
