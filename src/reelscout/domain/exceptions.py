"""ReelScout domain exceptions."""

from __future__ import annotations


class ReelScoutError(Exception):
    """Base class for all ReelScout errors."""


class ProviderError(ReelScoutError):
    """Raised when the metadata provider fails (network, timeout, bad payload)."""


class ProviderAuthError(ProviderError):
    """Raised when the provider rejects the configured API key."""


class ProviderNotConfiguredError(ReelScoutError):
    """Raised when no metadata provider is available (missing API key)."""


class InvalidSearchQueryError(ReelScoutError, ValueError):
    """Raised when a SearchQuery would violate its invariants."""
