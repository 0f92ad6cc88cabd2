"""
Monitoring module for the Zendesk ticket client.

This module tracks API usage and timing per request category so a
command-line run can print how many calls it made and how long they took.
"""

import datetime
from typing import Dict, Any

CATEGORIES = (
    "authentication",
    "ticket_create",
    "ticket_note",
    "ticket_details",
    "ticket_update",
    "ticket_listing",
    "ticket_comments",
    "other",
)

# Initialize the API call counters
api_calls = {category: 0 for category in CATEGORIES + ("total",)}

# Failed calls (non-2xx or transport error)
api_failures = {category: 0 for category in CATEGORIES + ("total",)}

# Store timing information
api_timing = {category: [] for category in CATEGORIES + ("total",)}


def track_api_call(category: str, execution_time: float, failed: bool = False) -> None:
    """
    Track an API call with its category and execution time.

    Args:
        category: The category of API call (authentication, ticket_create, etc.)
        execution_time: The execution time in seconds
        failed: Whether the call ended in an error
    """
    if category not in api_calls:
        category = "other"

    api_calls[category] += 1
    api_timing[category].append(execution_time)
    api_calls["total"] += 1
    api_timing["total"].append(execution_time)

    if failed:
        api_failures[category] += 1
        api_failures["total"] += 1


def get_api_usage_report() -> Dict[str, Any]:
    """
    Generate a report of API usage.

    Returns:
        Dict[str, Any]: A report with call counts, failures and timing information
    """
    report = {
        "calls": dict(api_calls),
        "failures": dict(api_failures),
        "timing": {
            k: {
                "total": sum(v),
                "average": sum(v) / len(v) if v else 0,
                "min": min(v) if v else 0,
                "max": max(v) if v else 0,
                "count": len(v)
            } for k, v in api_timing.items()
        },
        "timestamp": datetime.datetime.now().isoformat(),
    }

    return report


def print_api_usage_report() -> None:
    """Print a formatted API usage report to the console."""
    report = get_api_usage_report()

    print("\n" + "=" * 60)
    print("ZENDESK API USAGE REPORT")
    print("=" * 60)

    print("\nAPI CALLS BY CATEGORY:")
    for category, count in report["calls"].items():
        if category != "total" and count > 0:
            failures = report["failures"][category]
            suffix = f" ({failures} failed)" if failures else ""
            print(f"  - {category.replace('_', ' ').title()}: {count} calls{suffix}")
    print(f"  TOTAL: {report['calls']['total']} calls")

    print("\nTIMING INFORMATION (seconds):")
    for category, timing in report["timing"].items():
        if category != "total" and timing["count"] > 0:
            print(f"  - {category.replace('_', ' ').title()}:")
            print(f"    * Total: {timing['total']:.2f}s")
            print(f"    * Average: {timing['average']:.4f}s")
            print(f"    * Range: {timing['min']:.4f}s - {timing['max']:.4f}s")

    total_time = report["timing"]["total"]["total"]
    avg_time = report["timing"]["total"]["average"]
    print(f"\nOVERALL API TIME: {total_time:.2f} seconds")
    print(f"AVERAGE TIME PER API CALL: {avg_time:.4f} seconds")

    print("=" * 60)


def reset_api_tracking() -> None:
    """Reset all API tracking counters and timers."""
    for key in api_calls:
        api_calls[key] = 0
        api_failures[key] = 0

    for key in api_timing:
        api_timing[key] = []
