"""
Core module exports.
"""
from .enums import ProviderName, CommissionHealth
from .exceptions import (
    BaseServiceError,
    ShippingServiceError,
    ProviderAPIError,
    InvalidShipmentError,
    CommissionLedgerError,
    CommissionStorageError,
)

__all__ = [
    "ProviderName",
    "CommissionHealth",
    "BaseServiceError",
    "ShippingServiceError",
    "ProviderAPIError",
    "InvalidShipmentError",
    "CommissionLedgerError",
    "CommissionStorageError",
]
