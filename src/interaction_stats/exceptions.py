"""Custom exceptions for Interaction Stats."""


class InteractionStatsError(Exception):
    """Base exception for all Interaction Stats errors."""


class ConfigurationError(InteractionStatsError):
    """Exception raised for configuration related errors."""


class AuthenticationError(InteractionStatsError):
    """Exception raised for authentication failures."""


class CredentialError(AuthenticationError):
    """Exception raised when the saved credential store is missing or unreadable."""


class FetchError(InteractionStatsError):
    """Exception raised when a Google API request fails."""


class TransientFetchError(FetchError):
    """Exception raised when a retryable request keeps failing after all retries."""
