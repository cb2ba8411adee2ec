"""
Tests for the result aggregator and BatchReport properties.
"""

import pytest
from pydantic import ValidationError

from bulk_operations import BatchReport, OperationOutcome, OperationStatus, aggregate_report
from document_gateway import ErrorKind


def _outcomes():
    return [
        OperationOutcome.success(0, {"name": "CUST-00001"}),
        OperationOutcome.failure(1, "Customer not found", ErrorKind.NOT_FOUND),
        OperationOutcome.success(2, None),
    ]


def test_counts_are_derived_from_outcomes():
    report = aggregate_report(_outcomes(), rolled_back=False)
    assert report.completed_count == 2
    assert report.failed_count == 1
    assert report.total_count == 3
    assert report.rolled_back is False


def test_aggregation_is_repeatable():
    outcomes = _outcomes()
    first = aggregate_report(outcomes, rolled_back=True)
    second = aggregate_report(outcomes, rolled_back=True)
    assert first == second
    assert first.model_dump() == second.model_dump()
    assert first.model_dump_json() == second.model_dump_json()


def test_outcome_order_is_preserved():
    report = aggregate_report(_outcomes(), rolled_back=False)
    assert [outcome.index for outcome in report.outcomes] == [0, 1, 2]


def test_aggregation_does_not_alias_input_list():
    outcomes = _outcomes()
    report = aggregate_report(outcomes, rolled_back=False)
    outcomes.append(OperationOutcome.success(3))
    assert report.total_count == 3


@pytest.mark.parametrize("outcomes, rolled_back, expected", [
    ([OperationOutcome.success(0)], False, OperationStatus.SUCCESS),
    ([OperationOutcome.failure(0, "boom")], False, OperationStatus.FAILED),
    ([OperationOutcome.success(0), OperationOutcome.failure(1, "boom")], False, OperationStatus.PARTIAL),
    ([OperationOutcome.success(0), OperationOutcome.failure(1, "boom")], True, OperationStatus.ROLLED_BACK),
])
def test_status(outcomes, rolled_back, expected):
    assert aggregate_report(outcomes, rolled_back).status is expected


def test_success_rate():
    report = aggregate_report(_outcomes(), rolled_back=False)
    assert report.success_rate == pytest.approx(66.666, rel=1e-3)
    assert aggregate_report([], rolled_back=False).success_rate == 0.0


def test_failed_outcomes():
    report = aggregate_report(_outcomes(), rolled_back=False)
    assert [outcome.index for outcome in report.failed_outcomes] == [1]
    assert report.failed_outcomes[0].error_kind is ErrorKind.NOT_FOUND


def test_report_rejects_inconsistent_counts():
    with pytest.raises(ValidationError):
        BatchReport(outcomes=_outcomes(), rolled_back=False, completed_count=3, failed_count=1)


def test_report_is_immutable():
    report = aggregate_report(_outcomes(), rolled_back=False)
    with pytest.raises(ValidationError):
        report.rolled_back = True
