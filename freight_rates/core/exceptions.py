class BaseServiceError(Exception):
    """Base exception for all service-related errors."""
    pass

class ShippingServiceError(BaseServiceError):
    """Base exception for shipping rate errors."""
    pass

class ProviderAPIError(ShippingServiceError):
    """Raised when a rate provider call fails (timeout, non-2xx, bad body)."""

    def __init__(self, provider: str, message: str, status_code: int = None):
        self.provider = provider
        self.status_code = status_code
        super().__init__(f"{provider}: {message}")

class InvalidShipmentError(ShippingServiceError):
    """Raised when a shipment request is missing data a provider needs."""
    pass

class CommissionLedgerError(BaseServiceError):
    """Base exception for commission ledger errors."""
    pass

class CommissionStorageError(CommissionLedgerError):
    """Raised when commission records cannot be loaded or saved."""
    pass
