"""
Shared enums and constants used across the application.
"""

from enum import Enum

class ProviderName(str, Enum):
    """Rate providers the aggregator knows how to talk to"""
    SENDCLOUD = "sendcloud"
    SHIPPO = "shippo"
    SEARATES = "searates"
    SANDBOX = "sandbox"


class CommissionHealth(str, Enum):
    """Commission tracking status, based on the trailing 30-day daily average"""
    HEALTHY = "healthy"
    LOW = "low"
    NONE = "none"
