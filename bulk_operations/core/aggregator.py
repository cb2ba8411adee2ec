"""
Result Aggregator

Builds the final BatchReport from the recorded outcomes.
"""

from typing import Sequence

from bulk_operations.models.entities import BatchReport, OperationOutcome


def aggregate_report(outcomes: Sequence[OperationOutcome], rolled_back: bool) -> BatchReport:
    """
    Assemble a BatchReport.

    Pure function: no I/O and no hidden state, so equal inputs always give
    equal reports.

    Args:
        outcomes: Recorded outcomes in input order
        rolled_back: Whether the rollback phase ran

    Returns:
        The report with completed/failed counts derived from the outcomes.
    """
    completed = sum(1 for outcome in outcomes if outcome.succeeded)
    return BatchReport(
        outcomes=tuple(outcomes),
        rolled_back=rolled_back,
        completed_count=completed,
        failed_count=len(outcomes) - completed
    )
