"""Errors raised while loading overrides and while resolving through them."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when an override document cannot be loaded or applied."""

    def __init__(self, resource: str, cause: BaseException):
        self.resource = resource
        self.cause = cause
        super().__init__(f"Could not configure overrides from {resource}: {cause}")


class ResourceNotFoundError(LookupError):
    """Raised when no resource loader can locate a named override resource."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Resource '{name}' not found")


class DocumentInvalidError(ValueError):
    """
    Raised when an override document fails structural validation.

    The message is the first validation error; ``errors`` holds all of them.
    """

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(errors[0] if errors else "invalid override document")


class DelegationError(RuntimeError):
    """Raised when a query falls through to a baseline strategy that was not supplied."""

    def __init__(self, method: str):
        self.method = method
        super().__init__(
            f"No override for '{method}' and no baseline strategy to delegate to."
        )
