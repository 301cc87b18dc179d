class StorefrontError(Exception):
    """Base class for domain errors raised by the service layer."""


class ValidationFailed(StorefrontError, ValueError):
    """Input rejected before any write was issued."""


class NotFound(StorefrontError, LookupError):
    pass


class TransitionConflict(StorefrontError):
    """Order status changed underneath the caller, or is already terminal."""


__all__ = ["NotFound", "StorefrontError", "TransitionConflict", "ValidationFailed"]
