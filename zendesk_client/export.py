"""
Export Zendesk tickets and their comments to CSV.
"""

import logging
from typing import Any, Dict, List

import pandas as pd

logger = logging.getLogger(__name__)


def format_comment(comment: Dict[str, Any]) -> str:
    comment_type = "PUBLIC" if comment.get("public", True) else "INTERNAL"
    author = comment.get("author_id", "unknown")
    created_at = comment.get("created_at", "Unknown date")
    body = (comment.get("body") or "").strip()
    return (
        f"[{comment_type}] author {author} - {created_at}\n"
        f"{body}\n"
        f"{'-' * 40}\n"
    )


def format_ticket_for_export(
    ticket: Dict[str, Any],
    comments: List[Dict[str, Any]]
) -> Dict[str, Any]:
    """
    Format a ticket with its comments for export.

    Args:
        ticket: Ticket data
        comments: Comments for the ticket

    Returns:
        Dict[str, Any]: Flat row for the CSV file
    """
    formatted_comments = [format_comment(comment) for comment in comments]

    formatted_ticket = {
        'id': ticket.get('id'),
        'subject': ticket.get('subject'),
        'status': ticket.get('status'),
        'priority': ticket.get('priority'),
        'type': ticket.get('type'),
        'created_at': ticket.get('created_at'),
        'updated_at': ticket.get('updated_at'),
        'requester_id': ticket.get('requester_id'),
        'assignee_id': ticket.get('assignee_id'),
        'tags': ', '.join(ticket.get('tags') or []),
        'all_comments': "\n".join(formatted_comments) if formatted_comments else "No comments found."
    }

    # Add custom fields if available
    for custom_field in ticket.get('custom_fields') or []:
        if custom_field.get('value'):
            formatted_ticket[f"custom_field_{custom_field.get('id')}"] = custom_field.get('value')

    return formatted_ticket


def export_tickets_to_csv(rows: List[Dict[str, Any]], filename: str) -> int:
    """
    Write formatted tickets to a CSV file.

    Args:
        rows: Rows from format_ticket_for_export()
        filename: Destination path

    Returns:
        int: Number of rows written
    """
    if not rows:
        logger.debug("No tickets to export")
        return 0

    df = pd.DataFrame(rows)
    # utf-8-sig so spreadsheet tools detect accented characters
    df.to_csv(filename, index=False, encoding='utf-8-sig')
    logger.debug("Wrote %d rows to %s", len(rows), filename)
    return len(rows)
