"""Domain-specific exceptions for the ticket sales reporting core.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from TicketSalesError for easy catching.

Malformed numeric fields and missing catalog references are never raised:
they degrade to zero and sentinel names inside the engine.
"""


class TicketSalesError(Exception):
    """Base exception for all ticket sales reporting errors.

    Users can catch this exception to handle any error raised by the package.
    """

    pass


class ConfigError(TicketSalesError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - Invalid configuration values are provided (e.g. unknown timezone)
    - Required settings are missing (e.g. SUPABASE_URL)
    - Credential or snapshot files cannot be loaded or parsed
    """

    pass


class SourceUnavailableError(TicketSalesError):
    """Raised when the record source fails to return a collection.

    A report cannot be assembled without every source collection, so this
    error propagates to the caller instead of producing a zeroed report.

    Attributes:
        collection: Name of the collection that failed (e.g. "bookings").
    """

    def __init__(self, message: str, *, collection: str | None = None) -> None:
        super().__init__(message)
        self.collection = collection


class AuthenticationError(TicketSalesError):
    """Raised when an email/password pair is rejected by the credential store."""

    pass
