"""
Error hierarchy for sheet selection and loading.

Exception Hierarchy:
    DashboardError (base)
    ├── ConfigurationError          - Client lookup failed (not retryable)
    │   ├── UnknownClientError      - Slug not present in the registry
    │   └── ClientNotConfiguredError - Client exists but has no sheet yet
    └── SheetError                  - Loading the sheet failed (retryable)
        ├── SheetFetchError         - Network error or non-success status
        └── SheetParseError         - CSV document could not be parsed

Row-level problems are never raised; malformed rows are dropped by the parser.
"""

from __future__ import annotations


class DashboardError(Exception):
    """Base exception for all dashboard errors."""

    retryable = False

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(DashboardError):
    """The requested client cannot be mapped to a sheet."""


class UnknownClientError(ConfigurationError):
    def __init__(self, slug: str):
        super().__init__(f'Unknown client: "{slug}". Check your URL or add this client to the config.')
        self.slug = slug


class ClientNotConfiguredError(ConfigurationError):
    def __init__(self, slug: str, name: str):
        super().__init__(f'Client "{name}" has no sheet configured yet.')
        self.slug = slug
        self.name = name


class SheetError(DashboardError):
    """
    Loading the published sheet failed.

    These are recoverable by retrying the load; previously loaded
    records stay in place.
    """

    retryable = True


class SheetFetchError(SheetError):
    def __init__(self, message: str, details: str | None = None, status_code: int | None = None):
        super().__init__(message, details)
        self.status_code = status_code


class SheetParseError(SheetError):
    """The CSV export is malformed at the document level."""
