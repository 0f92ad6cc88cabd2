"""
Ticket operations for the Zendesk API.

Every operation takes a ZendeskSession from connect_zendesk(), issues a
single request and raises the operation's TicketOperationError subclass
when the request fails.
"""

import logging
from typing import Any, Dict, List, Optional, Type, Union

import requests

from zendesk_client.auth import ZendeskSession
from zendesk_client.client import decode_response, is_success, send_request
from zendesk_client.exceptions import (
    MissingSessionError,
    TicketCreateError,
    TicketFetchError,
    TicketNoteError,
    TicketOperationError,
    TicketUpdateError,
    ValidationError,
)
from zendesk_client.models import (
    NoteType,
    Priority,
    TicketComment,
    TicketCreateRequest,
    TicketNoteRequest,
    TicketReference,
    TicketUpdateRequest,
    build_request,
)

logger = logging.getLogger(__name__)


def _require_session(session: Optional[ZendeskSession]) -> ZendeskSession:
    if session is None:
        raise MissingSessionError()
    if not isinstance(session, ZendeskSession):
        raise MissingSessionError(
            f"Expected a ZendeskSession, got {type(session).__name__}. Call connect_zendesk() first."
        )
    return session


def _execute(
    session: ZendeskSession,
    method: str,
    url: str,
    error_class: Type[TicketOperationError],
    category: str,
    payload: Optional[Dict[str, Any]] = None,
) -> Any:
    """Send one request and return the decoded body, raising error_class on failure."""
    try:
        response = send_request(method, url, session.auth_headers, payload, category=category)
    except requests.RequestException as e:
        logger.error("[ERROR] %s %s failed: %s", method, url, e)
        raise error_class(str(e)) from e

    if not is_success(response):
        logger.error("[ERROR] %s %s returned %s", method, url, response.status_code)
        raise error_class(response.text, status_code=response.status_code)

    try:
        return decode_response(response)
    except ValueError as e:
        raise error_class(f"Invalid JSON in response: {e}", status_code=response.status_code) from e


def _expect_object(result: Any, error_class: Type[TicketOperationError]) -> Dict[str, Any]:
    if not isinstance(result, dict):
        raise error_class(f"Expected a JSON object, got {type(result).__name__}")
    return result


def create_ticket(
    *,
    session: ZendeskSession,
    subject: str,
    priority: Union[Priority, str],
    body: str,
    note_type: Union[NoteType, str],
    ticket_form_id: Optional[int] = None,
    return_ticket: bool = False,
) -> Optional[Dict[str, Any]]:
    """
    Create a new ticket with an initial comment.

    Args:
        session: Session from connect_zendesk()
        subject: Ticket subject
        priority: Low, Normal, High or Urgent
        body: First comment of the ticket
        note_type: Public or Internal
        ticket_form_id: Optional ticket form to use
        return_ticket: Return the decoded API response when True

    Returns:
        Optional[Dict[str, Any]]: The API response if return_ticket is set, else None
    """
    session = _require_session(session)
    request = build_request(
        TicketCreateRequest,
        subject=subject,
        priority=priority,
        comment=build_request(TicketComment, body=body, note_type=note_type),
        ticket_form_id=ticket_form_id,
    )

    result = _execute(
        session, "POST", session.url("tickets.json"), TicketCreateError, "ticket_create", request.to_payload()
    )

    ticket = result.get("ticket") if isinstance(result, dict) else None
    ticket_id = ticket.get("id") if isinstance(ticket, dict) else None
    logger.info("[SUCCESS] Created ticket %s: %s", ticket_id, subject)

    if return_ticket:
        return result
    return None


def add_ticket_note(
    *,
    session: ZendeskSession,
    ticket_id: int,
    body: str,
    note_type: Union[NoteType, str],
) -> None:
    """Add a public or internal comment to an existing ticket."""
    session = _require_session(session)
    request = build_request(
        TicketNoteRequest,
        ticket_id=ticket_id,
        comment=build_request(TicketComment, body=body, note_type=note_type),
    )

    url = session.url(f"tickets/{request.ticket_id}.json")
    _execute(session, "PUT", url, TicketNoteError, "ticket_note", request.to_payload())

    logger.info(
        "[SUCCESS] Added %s note to ticket %s",
        request.comment.note_type.value.lower(),
        request.ticket_id,
    )


def get_ticket(*, session: ZendeskSession, ticket_id: int) -> Dict[str, Any]:
    """
    Retrieve a single ticket.

    Returns:
        Dict[str, Any]: The decoded response, {"ticket": {...}}
    """
    session = _require_session(session)
    ref = build_request(TicketReference, ticket_id=ticket_id)

    url = session.url(f"tickets/{ref.ticket_id}.json")
    result = _execute(session, "GET", url, TicketFetchError, "ticket_details")
    logger.info("[SUCCESS] Retrieved ticket %s", ref.ticket_id)
    return _expect_object(result, TicketFetchError)


def update_ticket(
    *,
    session: ZendeskSession,
    ticket_id: int,
    body: Optional[str] = None,
    note_type: Optional[Union[NoteType, str]] = None,
    subject: Optional[str] = None,
    priority: Optional[Union[Priority, str]] = None,
    status: Optional[str] = None,
    fields: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Update fields of an existing ticket, optionally adding a comment.

    A comment is added when body is given; note_type then defaults to Internal.

    Returns:
        Dict[str, Any]: The decoded response, {"ticket": {...}, "audit": {...}}
    """
    session = _require_session(session)

    comment = None
    if body is not None:
        comment = build_request(
            TicketComment,
            body=body,
            note_type=NoteType.INTERNAL if note_type is None else note_type,
        )
    elif note_type is not None:
        # Still reject a bad note type even when there is nothing to attach it to
        NoteType.parse(note_type)

    request = build_request(
        TicketUpdateRequest,
        ticket_id=ticket_id,
        comment=comment,
        subject=subject,
        priority=priority,
        status=status,
        fields={} if fields is None else fields,
    )

    url = session.url(f"tickets/{request.ticket_id}.json")
    result = _execute(session, "PUT", url, TicketUpdateError, "ticket_update", request.to_payload())
    logger.info("[SUCCESS] Updated ticket %s", request.ticket_id)
    return _expect_object(result, TicketUpdateError)


def list_tickets(
    *,
    session: ZendeskSession,
    per_page: int = 100,
    max_pages: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Retrieve tickets, following next_page links.

    Args:
        session: Session from connect_zendesk()
        per_page: Page size, at most 100
        max_pages: Stop after this many pages; None reads every page

    Returns:
        List[Dict[str, Any]]: List of tickets
    """
    session = _require_session(session)
    if not 1 <= per_page <= 100:
        raise ValidationError("per_page must be between 1 and 100")

    url = session.url(f"tickets.json?per_page={per_page}")
    all_tickets = []
    pages = 0

    while url:
        data = _expect_object(_execute(session, "GET", url, TicketFetchError, "ticket_listing"), TicketFetchError)
        all_tickets.extend(data.get("tickets") or [])
        pages += 1

        if max_pages is not None and pages >= max_pages:
            break
        url = data.get("next_page")

    logger.info("[SUCCESS] Retrieved %d tickets in %d page(s)", len(all_tickets), pages)
    return all_tickets


def get_ticket_comments(*, session: ZendeskSession, ticket_id: int) -> List[Dict[str, Any]]:
    """Retrieve the comments of a ticket, oldest first."""
    session = _require_session(session)
    ref = build_request(TicketReference, ticket_id=ticket_id)

    url = session.url(f"tickets/{ref.ticket_id}/comments.json")
    comments = []

    while url:
        data = _expect_object(_execute(session, "GET", url, TicketFetchError, "ticket_comments"), TicketFetchError)
        comments.extend(data.get("comments") or [])
        url = data.get("next_page")

    return comments
