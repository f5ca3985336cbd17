# storefront/domain/errors.py


class StorefrontError(Exception):
    """Base error; carries the HTTP status it is rendered with."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(StorefrontError):
    """Bad input shape or range."""

    status_code = 400


class InvalidTransition(ValidationError):
    """Order status change not allowed by the configured transition table."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change order status from {current} to {requested}")


class Unauthorized(StorefrontError):
    status_code = 401


class NotFound(StorefrontError):
    status_code = 404


class Conflict(StorefrontError):
    # duplicate reviews are reported as plain bad requests on the wire
    status_code = 400


class ConcurrencyConflict(StorefrontError):
    """Optimistic version check lost against a concurrent writer."""

    status_code = 409


class StorageError(StorefrontError):
    """Local cart persistence failed (client side only)."""
