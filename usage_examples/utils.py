"""
Common Utilities for ERP Usage Examples

Provides helper functions for formatting output and printing batch reports
across all usage examples.
"""

from typing import Any


def print_section(title: str, width: int = 60):
    """
    Print a formatted section header.

    Args:
        title: Section title
        width: Width of the header line
    """
    print("\n" + "=" * width)
    print(f" {title}")
    print("=" * width)


def print_step(step_num: int, description: str):
    """
    Print a step description.

    Args:
        step_num: Step number
        description: Step description
    """
    print(f"\n[Step {step_num}] {description}")


def print_success(message: str):
    """Print a success message."""
    print(f"[SUCCESS] {message}")


def print_error(message: str):
    """Print an error message."""
    print(f"[ERROR] {message}")


def print_warning(message: str):
    """Print a warning message."""
    print(f"[WARNING] {message}")


def print_info(key: str, value: Any):
    """Print information in key-value format."""
    print(f"  - {key}: {value}")


def print_report(report, max_rows: int = 20):
    """
    Print a batch report as a table of outcomes.

    Args:
        report: BatchReport returned by BulkManager.run_batch
        max_rows: Maximum number of outcomes to display
    """
    print_info("Status", report.status.value)
    print_info("Completed", report.completed_count)
    print_info("Failed", report.failed_count)
    print_info("Rolled back", report.rolled_back)

    print("-" * 80)
    print(f"{'Index':<8} {'Result':<10} {'Details':<60}")
    print("-" * 80)
    for outcome in report.outcomes[:max_rows]:
        if outcome.succeeded:
            name = outcome.payload.get("name", "") if isinstance(outcome.payload, dict) else ""
            print(f"{outcome.index:<8} {'ok':<10} {name:<60}")
        else:
            kind = outcome.error_kind.value if outcome.error_kind else "UNEXPECTED"
            print(f"{outcome.index:<8} {'failed':<10} {kind}: {outcome.error_message}")
    if len(report.outcomes) > max_rows:
        print(f"... and {len(report.outcomes) - max_rows} more outcomes")
    print("-" * 80)
