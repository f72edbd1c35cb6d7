# Payload helper unit tests
import math
from datetime import datetime, timedelta, timezone

import pytest

from freight_rates.schemas.shipping import Address, Parcel
from freight_rates.services.shipping.payload_builder import (
    FALLBACK_TRANSIT_DAYS,
    cm_to_in,
    coerce_days,
    coerce_price,
    estimate_days_from_date,
    infer_country_code,
    kg_to_lb,
    missing_address_fields,
    parcel_dimensions_cm,
    resolve_country,
)


"""
1. Country code resolution
"""

@pytest.mark.parametrize("postal_code,expected", [
    ("SW1A 1AA", "GB"),
    ("m1 1ae", "GB"),
    ("M5V 3L9", "CA"),
    ("K1A0B1", "CA"),
    ("90210", "US"),
    ("10001-1234", "US"),
    ("de", "DE"),
    ("75008-A", "GB"),
    ("", "GB"),
])
def test_infer_country_code(postal_code, expected):
    assert infer_country_code(postal_code) == expected


def test_infer_country_code_uses_default_when_unknown():
    assert infer_country_code("1234", default="NL") == "NL"


def test_resolve_country_prefers_explicit_code():
    # A US-looking ZIP with an explicit country keeps the explicit country
    address = Address(name="A", street1="S", city="C", postal_code="75008", country="fr")
    assert resolve_country(address) == "FR"


def test_resolve_country_falls_back_to_postcode():
    address = Address(name="A", street1="S", city="C", postal_code="90210")
    assert resolve_country(address, "GB") == "US"


@pytest.mark.parametrize("country,postal_code,expected", [
    ("Germany", "10115", "DE"),
    ("united kingdom", "SW1A 1AA", "GB"),
    ("UK", "SW1A 1AA", "GB"),
    ("USA", "90210", "US"),
    ("Australia", "2000", "AU"),
    ("Narnia", "90210", "US"),
])
def test_resolve_country_maps_country_names(country, postal_code, expected):
    address = Address(name="A", street1="S", city="C", postal_code=postal_code, country=country)
    assert resolve_country(address) == expected


def test_missing_address_fields():
    address = Address(name="  ", street1="1 Road", city="", postal_code="AB1 2CD")
    assert missing_address_fields(address) == ["name", "city"]


"""
2. Units
"""

def test_unit_conversions():
    assert kg_to_lb(1) == 2.2
    assert kg_to_lb(2.5) == 5.51
    assert cm_to_in(2.54) == 1.0
    assert cm_to_in(30) == 11.81


def test_parcel_dimensions_defaults():
    parcel = Parcel(weight_kg=1.0, length_cm=50)
    assert parcel_dimensions_cm(parcel) == {'length': 50, 'width': 20, 'height': 15}
    assert not parcel.has_dimensions


"""
3. Price and transit coercion
"""

@pytest.mark.parametrize("value,expected", [
    ("12.50", 12.5),
    (8, 8.0),
    (0, None),
    (-3, None),
    (None, None),
    ("n/a", None),
    (True, None),
    (math.nan, None),
])
def test_coerce_price(value, expected):
    assert coerce_price(value) == expected


@pytest.mark.parametrize("value,expected", [
    (3, 3),
    (2.2, 3),
    ("25", 25),
    ("25-30 days", 25),
    ("", None),
    ("soon", None),
    (0, 1),
    (0.0, 1),
    ("0 days", 1),
    (-2, None),
    (math.inf, None),
    (None, None),
])
def test_coerce_days(value, expected):
    assert coerce_days(value) == expected


def test_estimate_days_from_date_rounds_up():
    now = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
    assert estimate_days_from_date("2024-03-03T18:00:00Z", now=now) == 3
    assert estimate_days_from_date(now + timedelta(days=2), now=now) == 2


def test_estimate_days_from_date_floor_and_fallback():
    now = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
    assert estimate_days_from_date("2024-02-20", now=now) == 1
    assert estimate_days_from_date(None, now=now) == FALLBACK_TRANSIT_DAYS
    assert estimate_days_from_date("next tuesday", now=now) == FALLBACK_TRANSIT_DAYS
