"""
Zendesk Ticket Client Package.

This package provides a session builder for Zendesk API token
authentication and functions to create, comment on, fetch and update
tickets.
"""

from zendesk_client.auth import ZendeskSession, build_auth_headers, connect_zendesk, validate_domain
from zendesk_client.exceptions import (
    ConnectivityError,
    MissingSessionError,
    SecretRetrievalError,
    TicketCreateError,
    TicketFetchError,
    TicketNoteError,
    TicketOperationError,
    TicketUpdateError,
    ValidationError,
    ZendeskError,
)
from zendesk_client.models import NoteType, Priority, normalize_priority
from zendesk_client.tickets import (
    add_ticket_note,
    create_ticket,
    get_ticket,
    get_ticket_comments,
    list_tickets,
    update_ticket,
)

__version__ = "1.0.0"

__all__ = [
    "ZendeskSession",
    "build_auth_headers",
    "connect_zendesk",
    "validate_domain",
    "NoteType",
    "Priority",
    "normalize_priority",
    "create_ticket",
    "add_ticket_note",
    "get_ticket",
    "update_ticket",
    "list_tickets",
    "get_ticket_comments",
    "ZendeskError",
    "ValidationError",
    "SecretRetrievalError",
    "ConnectivityError",
    "MissingSessionError",
    "TicketOperationError",
    "TicketCreateError",
    "TicketNoteError",
    "TicketFetchError",
    "TicketUpdateError",
]
