"""
Tests for PerformanceTimer history and summaries.
"""

import pytest

from bulk_operations.utils import PerformanceTimer


@pytest.mark.asyncio
async def test_history_keeps_only_most_recent_runs():
    timer = PerformanceTimer(enable_logging=False, max_history=3)

    for run in range(5):
        async with timer.time_operation("run_batch", metadata={"run": run}):
            pass

    history = timer.get_timing_history()
    assert isinstance(history, list)
    assert [result.metadata["run"] for result in history] == [2, 3, 4]
    assert timer.get_summary("run_batch").total_runs == 3


@pytest.mark.asyncio
async def test_failed_run_is_recorded_and_reraised():
    timer = PerformanceTimer(enable_logging=False)

    with pytest.raises(RuntimeError):
        async with timer.time_operation("run_batch"):
            raise RuntimeError("boom")

    summary = timer.get_summary("run_batch")
    assert summary.failed_runs == 1
    assert summary.successful_runs == 0


@pytest.mark.asyncio
async def test_history_copy_and_clear():
    timer = PerformanceTimer(enable_logging=False)
    async with timer.time_operation("run_batch"):
        pass

    history = timer.get_timing_history()
    history.clear()
    assert len(timer.get_timing_history()) == 1

    timer.clear_history()
    assert timer.get_timing_history() == []
    assert timer.get_summary("run_batch") is None
