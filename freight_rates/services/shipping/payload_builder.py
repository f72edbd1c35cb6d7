# freight_rates/services/shipping/payload_builder.py
"""
Provider Payload Helpers

Shared helpers for turning a ShipmentRequest into provider payloads and
provider responses back into unified rates:
- address validation and country code resolution
- metric -> imperial unit conversion
- price coercion and transit-day estimation
"""

import math
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from freight_rates.schemas.shipping import Address, Parcel


KG_TO_LB = 2.20462
CM_PER_INCH = 2.54

# Used when the parcel has no dimensions (cm)
DEFAULT_PARCEL_DIMENSIONS_CM = {
    'length': 30,
    'width': 20,
    'height': 15,
}

# Transit estimate when a provider gives neither days nor a delivery date
FALLBACK_TRANSIT_DAYS = 3

REQUIRED_ADDRESS_FIELDS = ('name', 'street1', 'city', 'postal_code')

# Country names customers type instead of ISO codes (Address upper-cases them)
COUNTRY_NAME_CODES = {
    'UNITED KINGDOM': 'GB',
    'GREAT BRITAIN': 'GB',
    'UK': 'GB',
    'UNITED STATES': 'US',
    'USA': 'US',
    'CANADA': 'CA',
    'AUSTRALIA': 'AU',
    'GERMANY': 'DE',
    'FRANCE': 'FR',
}

# Postcode heuristics, best-effort only. Explicit ISO codes always win.
UK_POSTCODE_PATTERN = re.compile(r'^[A-Z]{1,2}\d')
CA_POSTCODE_PATTERN = re.compile(r'^[A-Z]\d[A-Z]\s?\d[A-Z]\d$')
US_ZIP_PATTERN = re.compile(r'^\d{5}(-\d{4})?$')


def kg_to_lb(weight_kg: float) -> float:
    return round(weight_kg * KG_TO_LB, 2)


def cm_to_in(length_cm: float) -> float:
    return round(length_cm / CM_PER_INCH, 2)


def infer_country_code(postal_code: str, default: str = "GB") -> str:
    """
    Guess an ISO-2 country code from a postal code.

    Examples:
        "GB"       -> GB (a 2-character value is taken as a country code)
        "SW1A 1AA" -> GB
        "M5V 3L9"  -> CA
        "90210"    -> US
        "75008-A"  -> default
    """
    value = (postal_code or "").strip().upper()
    if len(value) == 2 and value.isalpha():
        return value
    # Canada first: "M5V 3L9" also matches the UK prefix pattern
    if CA_POSTCODE_PATTERN.match(value):
        return "CA"
    if UK_POSTCODE_PATTERN.match(value):
        return "GB"
    if US_ZIP_PATTERN.match(value):
        return "US"
    return default


def resolve_country(address: Address, default: str = "GB") -> str:
    """Known country name (UK included), then an ISO-2 code, then the postcode guess"""
    country = address.country
    if country in COUNTRY_NAME_CODES:
        return COUNTRY_NAME_CODES[country]
    if country and len(country) == 2:
        return country
    return infer_country_code(address.postal_code, default)


def missing_address_fields(address: Address) -> List[str]:
    return [field for field in REQUIRED_ADDRESS_FIELDS if not getattr(address, field)]


def parcel_dimensions_cm(parcel: Parcel) -> Dict[str, float]:
    """Parcel dimensions with defaults filled in for any that are missing"""
    return {
        'length': parcel.length_cm or DEFAULT_PARCEL_DIMENSIONS_CM['length'],
        'width': parcel.width_cm or DEFAULT_PARCEL_DIMENSIONS_CM['width'],
        'height': parcel.height_cm or DEFAULT_PARCEL_DIMENSIONS_CM['height'],
    }


def coerce_price(value: Any) -> Optional[float]:
    """Price as a float, or None if missing, non-numeric or not positive"""
    if value is None or isinstance(value, bool):
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(price) or math.isinf(price) or price <= 0:
        return None
    return price


def coerce_days(value: Any) -> Optional[int]:
    """Transit days from an int, float or strings like "25" / "25-30 days" """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if math.isnan(value) or math.isinf(value):
            return None
        return max(1, math.ceil(value)) if value >= 0 else None
    match = re.search(r"\d+", str(value))
    if not match:
        return None
    # Same-day services count as one day
    return max(1, int(match.group()))


def _parse_datetime(value: Union[str, datetime]) -> Optional[datetime]:
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip().replace('Z', '+00:00'))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def estimate_days_from_date(
    delivery_date: Optional[Union[str, datetime]],
    now: Optional[datetime] = None,
) -> int:
    """
    Whole days until the delivery date, rounded up and never below 1.
    No date (or an unparseable one) gives FALLBACK_TRANSIT_DAYS.
    """
    if not delivery_date:
        return FALLBACK_TRANSIT_DAYS
    parsed = _parse_datetime(delivery_date)
    if parsed is None:
        return FALLBACK_TRANSIT_DAYS

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    diff_days = math.ceil((parsed - now).total_seconds() / 86400)
    return max(1, diff_days)
