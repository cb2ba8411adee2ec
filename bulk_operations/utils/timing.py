"""
Performance Timing Utilities

Records how long bulk runs take and summarises the history per run type.
"""

import logging
import statistics
import time
from collections import deque
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Deque, Dict, List, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class TimingResult(BaseModel):
    """
    Result of a timed run.

    Attributes:
        operation_name: Name of the timed run type
        execution_time: Time taken in seconds
        timestamp: When the run started
        success: Whether the run completed without raising
        metadata: Additional metadata about the run
    """
    operation_name: str
    execution_time: float = Field(0.0, description="Execution time in seconds")
    timestamp: datetime = Field(default_factory=datetime.now)
    success: bool = True
    metadata: Dict[str, Any] = Field(default_factory=dict)


class TimingSummary(BaseModel):
    """
    Aggregated timing statistics for runs of the same type.
    """
    operation_name: str
    total_runs: int = 0
    successful_runs: int = 0
    failed_runs: int = 0
    average_execution_time: float = 0.0
    median_execution_time: float = 0.0
    max_execution_time: float = 0.0


class PerformanceTimer:
    """
    Async context manager factory for timing runs and keeping their history.
    """

    def __init__(self, enable_logging: bool = True, max_history: int = 1000):
        """
        Args:
            enable_logging: Whether to log each timing result at debug level
            max_history: Number of results kept; oldest are dropped first
        """
        self._enable_logging = enable_logging
        self._timing_history: Deque[TimingResult] = deque(maxlen=max_history)

    @asynccontextmanager
    async def time_operation(self, operation_name: str, metadata: Optional[Dict[str, Any]] = None):
        """
        Time the enclosed block.

        Yields:
            TimingResult that is completed when the block exits. Callers may
            add entries to its metadata while the block runs.
        """
        start_time = time.perf_counter()
        result = TimingResult(operation_name=operation_name, metadata=dict(metadata or {}))
        try:
            yield result
        except BaseException:
            result.success = False
            raise
        finally:
            result.execution_time = time.perf_counter() - start_time
            self._timing_history.append(result)

            if self._enable_logging:
                status = "succeeded" if result.success else "failed"
                logger.debug(
                    f"Operation '{operation_name}' {status} in {result.execution_time*1000:.2f}ms"
                )

    def get_timing_history(self) -> List[TimingResult]:
        """Get a copy of the timing history."""
        return list(self._timing_history)

    def get_summary(self, operation_name: str) -> Optional[TimingSummary]:
        """
        Aggregate statistics for one run type.

        Returns:
            TimingSummary, or None if nothing was recorded under that name
        """
        results = [r for r in self._timing_history if r.operation_name == operation_name]
        if not results:
            return None

        execution_times = [r.execution_time for r in results]
        successful = sum(1 for r in results if r.success)
        return TimingSummary(
            operation_name=operation_name,
            total_runs=len(results),
            successful_runs=successful,
            failed_runs=len(results) - successful,
            average_execution_time=statistics.mean(execution_times),
            median_execution_time=statistics.median(execution_times),
            max_execution_time=max(execution_times)
        )

    def clear_history(self) -> None:
        self._timing_history.clear()
