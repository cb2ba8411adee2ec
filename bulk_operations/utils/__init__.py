"""
Bulk Operations Utilities

Contains helper utilities for bulk operations.
"""

from .timing import PerformanceTimer, TimingResult, TimingSummary

__all__ = ['PerformanceTimer', 'TimingResult', 'TimingSummary']
