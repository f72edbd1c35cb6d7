# tests/conftest.py
import pytest

from freight_rates.core.config import Settings
from freight_rates.schemas.shipping import Address, FreightDetails, Parcel, ShipmentRequest
from freight_rates.services.shipping.commission import CommissionConfig


@pytest.fixture
def settings():
    """Provide test settings (explicit values, no .env)"""
    return Settings(
        SHIPPO_API_KEY="test_shippo_key",
        SENDCLOUD_PUBLIC_KEY="test_public",
        SENDCLOUD_SECRET_KEY="test_secret",
        SEARATES_API_KEY="test_searates_key",
        PROVIDER_TIMEOUT_SECONDS=2.0,
        DEFAULT_COUNTRY_CODE="GB",
        SHIPPING_SANDBOX_MODE=False,
        COMMISSION_STORAGE_BACKEND="memory",
    )


@pytest.fixture
def commission_config():
    return CommissionConfig.from_mapping({
        "sendcloud": {"percentage": 5.0, "fixed_fee": 0.50},
        "shippo": {"percentage": 4.5, "fixed_fee": 0.30},
        "default": {"percentage": 5.0, "fixed_fee": 0.50},
    })


@pytest.fixture
def sender():
    return Address(
        name="Rock Shop Ltd",
        street1="12 Denmark Street",
        city="London",
        postal_code="WC2H 8NE",
        country="GB",
        phone="+44 20 7946 0000",
        email="shop@example.com",
    )


@pytest.fixture
def recipient():
    return Address(
        name="Jo Bloggs",
        street1="1 High Street",
        city="Manchester",
        postal_code="M1 1AE",
    )


@pytest.fixture
def parcel():
    return Parcel(weight_kg=2.5, length_cm=40, width_cm=30, height_cm=20, declared_value=150.0)


@pytest.fixture
def shipment_request(sender, recipient, parcel):
    return ShipmentRequest(sender=sender, recipient=recipient, parcel=parcel)


@pytest.fixture
def freight_request(sender, recipient, parcel):
    return ShipmentRequest(
        sender=sender,
        recipient=recipient,
        parcel=parcel,
        freight=FreightDetails(
            origin_port="cnsha",
            destination_port="gbfxt",
            container_type="40hc",
            total_weight_ton=12.5,
        ),
    )
