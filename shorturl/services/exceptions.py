"""Exceptions for the URL shortener service layer.

This module contains the exception hierarchy for the service layer,
providing domain-specific exceptions that abstract underlying implementation details.
"""


class ServiceError(Exception):
    """Base exception for all service-level errors."""
    pass


class ValidationError(ServiceError):
    """Input is malformed or missing."""
    pass


class NotFoundError(ServiceError):
    """No mapping exists for the requested key."""
    pass


class KeyExhaustionError(ServiceError):
    """No unique key could be allocated."""
    pass


class StorageError(ServiceError):
    """Persistence failed for a reason other than an expected key race."""
    pass
