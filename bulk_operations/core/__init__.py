"""
Core Bulk Components

Contains the validator, executor, compensation and aggregation components
and the BulkManager entry point.
"""

from .aggregator import aggregate_report
from .compensation import CompensationPlanner, CreatedDocument, RollbackExecutor, RollbackSummary
from .executor import SequentialExecutor
from .manager import BulkManager
from .validator import BatchValidator

__all__ = [
    'aggregate_report',
    'CompensationPlanner',
    'CreatedDocument',
    'RollbackExecutor',
    'RollbackSummary',
    'SequentialExecutor',
    'BulkManager',
    'BatchValidator'
]
