"""
Bulk Operations Module

Executes a heterogeneous, ordered list of mutating operations against the
remote document store as one logical unit:
- Whole-batch validation before any remote call (1..100 operations)
- Strictly sequential execution, one outcome per attempted operation
- Best-effort mode: every operation attempted exactly once
- All-or-nothing mode: stop at the first failure and delete every document
  created earlier in the batch, most recent first
- Transaction previews through server-side validation

The backend has no multi-document transactions, so all-or-nothing mode is a
partial undo: only creations are compensated.

Typical usage from external projects:

    from bulk_operations import (
        BulkManager,
        BulkOperationConfig,
        CreateOperation,
        UpdateOperation,
        BatchValidationError
    )

    manager = BulkManager(gateway, config=BulkOperationConfig())

    try:
        report = await manager.run_batch(
            [
                CreateOperation(resource_type="Lead", document={"lead_name": "Jane"}),
                UpdateOperation(resource_type="Lead", identifier="LEAD-0001",
                                patch={"status": "Replied"}),
            ],
            rollback_on_failure=False
        )
        for outcome in report.failed_outcomes:
            print(f"Operation {outcome.index} failed: {outcome.error_message}")
    except BatchValidationError as e:
        print(f"Batch rejected at index {e.index}: {e}")
"""

# Core manager (primary interface)
from .core.manager import BulkManager

# Configuration
from .bulk_ops_config import BulkOperationConfig, MAX_BATCH_OPERATIONS

# Data models
from .models.entities import (
    OperationType,
    OperationStatus,
    CreateOperation,
    UpdateOperation,
    DeleteOperation,
    SubmitOperation,
    CancelOperation,
    Operation,
    OperationOutcome,
    BatchReport,
    IssueSeverity,
    PreviewIssue,
    EstimatedImpact,
    TransactionPreview
)

# Components
from .core.validator import BatchValidator
from .core.executor import SequentialExecutor
from .core.compensation import CompensationPlanner, CreatedDocument, RollbackExecutor, RollbackSummary
from .core.aggregator import aggregate_report

# Exceptions
from .bulk_ops_exceptions import (
    BulkOperationError,
    BatchValidationError,
    ValidationReason
)

__all__ = [
    # Primary interface
    'BulkManager',
    'BulkOperationConfig',
    'MAX_BATCH_OPERATIONS',
    # Models
    'OperationType',
    'OperationStatus',
    'CreateOperation',
    'UpdateOperation',
    'DeleteOperation',
    'SubmitOperation',
    'CancelOperation',
    'Operation',
    'OperationOutcome',
    'BatchReport',
    'IssueSeverity',
    'PreviewIssue',
    'EstimatedImpact',
    'TransactionPreview',
    # Components
    'BatchValidator',
    'SequentialExecutor',
    'CompensationPlanner',
    'CreatedDocument',
    'RollbackExecutor',
    'RollbackSummary',
    'aggregate_report',
    # Exceptions
    'BulkOperationError',
    'BatchValidationError',
    'ValidationReason'
]
