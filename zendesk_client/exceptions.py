"""
Exception hierarchy for the Zendesk ticket client.

Every error raised by this package derives from ZendeskError so callers
can handle the whole family with a single except clause.
"""

from typing import Optional


class ZendeskError(Exception):
    """Base exception for Zendesk-related errors"""
    pass


class ValidationError(ZendeskError, ValueError):
    """Raised when input is rejected before any network or vault call"""
    pass


class SecretRetrievalError(ZendeskError):
    """Raised when the API token cannot be read from the secret store"""
    pass


class ConnectivityError(ZendeskError):
    """Raised when the liveness check fails while building a session"""
    pass


class MissingSessionError(ZendeskError):
    """Raised when a ticket operation is called without a session"""

    def __init__(self, message: str = "No Zendesk session. Call connect_zendesk() first."):
        super().__init__(message)


class TicketOperationError(ZendeskError):
    """
    Base class for failures of a single ticket request.

    Attributes:
        status_code: HTTP status of the failed response, None on transport failure
        detail: Response body or the underlying exception message
    """

    action = "process ticket"

    def __init__(self, detail: str, status_code: Optional[int] = None):
        self.detail = detail
        self.status_code = status_code
        if status_code is None:
            message = f"Failed to {self.action}: {detail}"
        else:
            message = f"Failed to {self.action}: {status_code} - {detail}"
        super().__init__(message)


class TicketCreateError(TicketOperationError):
    action = "create ticket"


class TicketNoteError(TicketOperationError):
    action = "add ticket note"


class TicketFetchError(TicketOperationError):
    action = "retrieve ticket"


class TicketUpdateError(TicketOperationError):
    action = "update ticket"
