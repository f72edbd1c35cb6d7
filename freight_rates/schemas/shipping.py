"""
Schemas for shipment requests and the provider-agnostic rate records
produced by the carrier adapters.
"""

from typing import Optional, List, Dict, Any
from pydantic import Field, field_validator

from freight_rates.schemas.base import BaseSchema, FrozenSchema


class Address(FrozenSchema):
    """
    Postal address for a sender or recipient.

    Fields default to empty strings so that an incomplete address reaches the
    adapters, which reject it per-provider instead of failing the whole request.
    """
    name: str = ""
    company: Optional[str] = None
    street1: str = ""
    street2: Optional[str] = None
    city: str = ""
    state: Optional[str] = None
    postal_code: str = ""
    country: Optional[str] = None  # ISO-2 preferred
    phone: Optional[str] = None
    email: Optional[str] = None

    @field_validator('name', 'street1', 'city', 'postal_code', mode='before')
    @classmethod
    def strip_required(cls, v):
        if v is None:
            return ""
        return str(v).strip()

    @field_validator('country', mode='before')
    @classmethod
    def normalize_country(cls, v):
        if v is None:
            return None
        v = str(v).strip().upper()
        return v or None


class Parcel(FrozenSchema):
    """Parcel in metric units (kg / cm)"""
    weight_kg: float = Field(gt=0)
    length_cm: Optional[float] = Field(default=None, gt=0)
    width_cm: Optional[float] = Field(default=None, gt=0)
    height_cm: Optional[float] = Field(default=None, gt=0)
    declared_value: float = 0.0
    description: Optional[str] = None

    @property
    def has_dimensions(self) -> bool:
        return all(d is not None for d in (self.length_cm, self.width_cm, self.height_cm))


class FreightDetails(FrozenSchema):
    """Container leg for FCL quotes (UN/LOCODE ports, e.g. CNSHA -> GBFXT)"""
    origin_port: str
    destination_port: str
    container_type: str  # e.g. "20GP", "40HC"
    total_weight_ton: Optional[float] = None


class ShipmentRequest(FrozenSchema):
    """Immutable input to a single aggregation call"""
    sender: Address
    recipient: Address
    parcel: Parcel
    freight: Optional[FreightDetails] = None


class UnifiedRate(BaseSchema):
    """
    One quote, normalized across providers.

    `commission` and the is_* labels are derived by the aggregator; adapters
    leave them at their defaults.
    """
    id: str  # provider-prefixed, e.g. "shippo_<object_id>"
    provider: str
    carrier_name: str
    service_name: str
    price: float = Field(gt=0)
    currency: str
    estimated_days: int = Field(ge=1)
    estimated_delivery_date: Optional[str] = None
    is_cheapest: bool = False
    is_fastest: bool = False
    is_recommended: bool = False
    commission: Optional[float] = Field(default=None, ge=0)
    original_data: Dict[str, Any] = Field(default_factory=dict)


class RateComparison(BaseSchema):
    """Result of fanning out to every provider"""
    cheapest: Optional[UnifiedRate] = None
    fastest: Optional[UnifiedRate] = None
    recommended: Optional[UnifiedRate] = None
    all_rates: List[UnifiedRate] = Field(default_factory=list)  # ascending by price
    savings: float = 0.0
    total_commission: float = 0.0


class RateCommissionSummary(BaseSchema):
    """Commission the platform would earn across a set of quoted rates"""
    total: float = 0.0
    by_provider: Dict[str, float] = Field(default_factory=dict)
    average_margin: float = 0.0
