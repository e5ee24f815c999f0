"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ConfigurationError(DomainException):
    """Rate tier table is malformed (overlapping, unsorted or invalid ranges)"""

    pass


class InvalidPurchaseError(DomainException):
    """Purchase snapshot violates its invariants"""

    pass


class PurchaseServiceError(DomainException):
    """Purchase service returned an error or is unavailable"""

    pass


class PurchaseNotFoundError(DomainException):
    """Purchase does not exist in the system of record"""

    pass


class PurchaseAlreadyRepaidError(DomainException):
    """Purchase has already been settled in full"""

    pass


class SettlementError(DomainException):
    """Raised when an Err result is unwrapped"""

    def __init__(self, kind, message: str, detail: dict | None = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.detail = detail or {}
