"""
Command-line tool to manage Zendesk tickets.

Connects with an API token read from a secret store, then creates,
comments on, fetches, updates or exports tickets. Connection defaults
come from ZENDESK_* environment variables or a .env file.
"""

import sys
import argparse
import datetime
import json
import logging
import time

from zendesk_client.auth import connect_zendesk
from zendesk_client.client import set_default_timeout
from zendesk_client.config import load_settings
from zendesk_client.exceptions import ZendeskError
from zendesk_client.export import export_tickets_to_csv, format_ticket_for_export
from zendesk_client.models import NoteType, Priority
from zendesk_client.monitoring import print_api_usage_report, reset_api_tracking
from zendesk_client.secrets import get_secret_store
from zendesk_client.tickets import (
    add_ticket_note,
    create_ticket,
    get_ticket,
    get_ticket_comments,
    list_tickets,
    update_ticket,
)

NOTE_TYPES = [m.value for m in NoteType]
PRIORITIES = [m.value for m in Priority]


def parse_arguments(argv=None, settings=None):
    """Parse command line arguments."""
    settings = settings or load_settings()

    parser = argparse.ArgumentParser(description="Create, comment on, fetch and update Zendesk tickets")
    parser.add_argument("--email", default=settings.email, help="Agent email (ZENDESK_EMAIL)")
    parser.add_argument("--domain", default=settings.domain, help="Tenant domain, e.g. acme.zendesk.com (ZENDESK_DOMAIN)")
    parser.add_argument("--vault", default=settings.vault_name, help="Vault holding the API token (ZENDESK_VAULT)")
    parser.add_argument("--secret", default=settings.secret_name, help="API token secret name (ZENDESK_SECRET)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--skip-report", action="store_true", help="Skip the API usage report at the end")

    subparsers = parser.add_subparsers(dest="command", required=True)

    create = subparsers.add_parser("create", help="Create a ticket")
    create.add_argument("--subject", required=True)
    create.add_argument("--priority", choices=PRIORITIES, default="Normal")
    create.add_argument("--body", required=True, help="First comment of the ticket")
    create.add_argument("--note-type", choices=NOTE_TYPES, default="Public")
    create.add_argument("--form-id", type=int, default=None, help="Ticket form id")
    create.add_argument("--return-ticket", action="store_true", help="Print the created ticket as JSON")

    note = subparsers.add_parser("note", help="Add a note to a ticket")
    note.add_argument("ticket_id", type=int)
    note.add_argument("--body", required=True)
    note.add_argument("--note-type", choices=NOTE_TYPES, default="Internal")

    get = subparsers.add_parser("get", help="Print a ticket as JSON")
    get.add_argument("ticket_id", type=int)

    update = subparsers.add_parser("update", help="Update ticket fields")
    update.add_argument("ticket_id", type=int)
    update.add_argument("--body", default=None, help="Comment to add with the update")
    update.add_argument("--note-type", choices=NOTE_TYPES, default=None)
    update.add_argument("--subject", default=None)
    update.add_argument("--priority", choices=PRIORITIES, default=None)
    update.add_argument("--status", default=None)

    export = subparsers.add_parser("export", help="Export tickets with comments to CSV")
    export.add_argument("--output", default=None, help="CSV file name")
    export.add_argument("--max-pages", type=int, default=None, help="Stop after this many pages of tickets")

    args = parser.parse_args(argv)

    missing = [name for name in ("email", "domain", "vault", "secret") if not getattr(args, name)]
    if missing:
        parser.error("missing connection settings: " + ", ".join(f"--{name}" for name in missing))

    return args


def run_command(args, session) -> None:
    """Run the selected subcommand against a connected session."""
    if args.command == "create":
        result = create_ticket(
            session=session,
            subject=args.subject,
            priority=args.priority,
            body=args.body,
            note_type=args.note_type,
            ticket_form_id=args.form_id,
            return_ticket=args.return_ticket,
        )
        if result is not None:
            print(json.dumps(result, indent=2, ensure_ascii=False))

    elif args.command == "note":
        add_ticket_note(session=session, ticket_id=args.ticket_id, body=args.body, note_type=args.note_type)

    elif args.command == "get":
        result = get_ticket(session=session, ticket_id=args.ticket_id)
        print(json.dumps(result, indent=2, ensure_ascii=False))

    elif args.command == "update":
        result = update_ticket(
            session=session,
            ticket_id=args.ticket_id,
            body=args.body,
            note_type=args.note_type,
            subject=args.subject,
            priority=args.priority,
            status=args.status,
        )
        print(json.dumps(result, indent=2, ensure_ascii=False))

    elif args.command == "export":
        tickets = list_tickets(session=session, max_pages=args.max_pages)
        print(f"\nProcessing {len(tickets)} tickets...")
        rows = []
        for ticket in tickets:
            comments = get_ticket_comments(session=session, ticket_id=ticket["id"])
            rows.append(format_ticket_for_export(ticket, comments))

        filename = args.output or f"zendesk_tickets_{datetime.date.today():%Y_%m_%d}.csv"
        written = export_tickets_to_csv(rows, filename)
        if written:
            print(f"[SUCCESS] Exported {written} tickets to {filename}")
        else:
            print("No tickets to export.")


def main(argv=None) -> int:
    """Run the Zendesk ticket tool."""
    try:
        settings = load_settings()
    except ValueError as e:
        print(f"[ERROR] Invalid configuration: {e}")
        return 2

    args = parse_arguments(argv, settings)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    set_default_timeout(settings.timeout)
    reset_api_tracking()

    start_time = time.time()

    try:
        session = connect_zendesk(
            email=args.email,
            domain=args.domain,
            vault_name=args.vault,
            secret_name=args.secret,
            secret_store=get_secret_store(settings),
        )
        run_command(args, session)
        exit_code = 0
    except ZendeskError as e:
        print(f"[ERROR] {e}")
        exit_code = 1
    except OSError as e:
        print(f"[ERROR] Failed to write export: {e}")
        exit_code = 1

    if not args.skip_report:
        print_api_usage_report()

    total_time = time.time() - start_time
    print(f"\nTotal execution time: {total_time:.2f} seconds")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
