"""Custom exception types for the ogh GitHub development helper."""


class OghError(Exception):
    """Base exception for all errors raised by ogh."""


class ConfigurationError(OghError):
    """Raised when runtime configuration values are missing or invalid."""


class AuthenticationError(OghError):
    """Raised when GitHub credentials are unavailable."""


class ApiError(OghError):
    """Raised when a GitHub API request fails or returns an unexpected response."""


class DataValidationError(OghError):
    """Raised when API payloads violate the expected data contract.

    A malformed review timestamp is reported this way and aborts the run.
    """
