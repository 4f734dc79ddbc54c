from __future__ import annotations


class DomainError(Exception):
    """
    Base class for predictable, user-facing domain/use-case errors.
    """


class NotFoundError(DomainError):
    pass


class ConfigurationError(DomainError):
    """
    Missing/invalid server-side configuration required to perform an operation.
    """
