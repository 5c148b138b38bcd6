"""
Centralized exception hierarchy for domain-specific errors.

This module provides custom exception classes that represent specific
error conditions in the application, enabling better error handling and
client-side error recovery.
"""


class JournalSyncError(Exception):
    """Base exception for all application-specific errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(JournalSyncError):
    """Exception raised when data validation fails."""


class ResourceNotFoundError(JournalSyncError):
    """Exception raised when a requested resource is not found."""


class UnauthorizedError(JournalSyncError):
    """Exception raised when the caller is missing or lacks the admin role."""


class ExternalServiceError(JournalSyncError):
    """Exception raised when service calls fail."""


class ProviderError(ExternalServiceError):
    """The GPS provider answered a call with a non-zero status."""


class MalformedResponseError(ExternalServiceError):
    """The GPS provider answered with a body that is not valid JSON."""


class AuthenticationError(JournalSyncError):
    """Exception raised when the GPS provider rejects the login."""


class PersistenceError(JournalSyncError):
    """Exception raised when a journal write fails part way through a sync."""
