"""
Data Models

Contains Pydantic models for bulk operations, their outcomes and
transaction previews.
"""

from .entities import (
    OperationType,
    OperationStatus,
    OperationBase,
    TargetedOperation,
    CreateOperation,
    UpdateOperation,
    DeleteOperation,
    SubmitOperation,
    CancelOperation,
    Operation,
    OPERATION_MODELS,
    OperationOutcome,
    BatchReport,
    IssueSeverity,
    PreviewIssue,
    EstimatedImpact,
    TransactionPreview
)

__all__ = [
    'OperationType',
    'OperationStatus',
    'OperationBase',
    'TargetedOperation',
    'CreateOperation',
    'UpdateOperation',
    'DeleteOperation',
    'SubmitOperation',
    'CancelOperation',
    'Operation',
    'OPERATION_MODELS',
    'OperationOutcome',
    'BatchReport',
    'IssueSeverity',
    'PreviewIssue',
    'EstimatedImpact',
    'TransactionPreview'
]
