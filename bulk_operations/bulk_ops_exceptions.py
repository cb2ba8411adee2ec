"""
Bulk Operations Exceptions

Exception hierarchy for the bulk transaction executor. Only failures that
happen before any gateway call are raised to the caller; per-operation
failures are reported inside the BatchReport instead.
"""

from enum import Enum
from typing import Any, Dict, Optional

from erp_ops_exceptions import ErpOpsError


class BulkOperationError(ErpOpsError):
    """
    Base exception for all bulk operation errors.

    Allows external projects to catch every bulk-executor error with a
    single except clause if desired.
    """
    pass


class ValidationReason(str, Enum):
    """
    Reason a batch was rejected before execution.
    """
    BATCH_EMPTY = "BATCH_EMPTY"
    TOO_MANY_OPERATIONS = "TOO_MANY_OPERATIONS"
    INVALID_OPERATION_TYPE = "INVALID_OPERATION_TYPE"
    RESOURCE_TYPE_REQUIRED = "RESOURCE_TYPE_REQUIRED"
    IDENTIFIER_REQUIRED = "IDENTIFIER_REQUIRED"
    DOCUMENT_REQUIRED = "DOCUMENT_REQUIRED"
    PATCH_REQUIRED = "PATCH_REQUIRED"
    INVALID_FIELD = "INVALID_FIELD"


class BatchValidationError(BulkOperationError):
    """
    Raised when a batch fails structural validation.

    The whole batch is rejected and no gateway call has been made.

    Attributes:
        message: Human-readable error message naming the offending index
        reason: Machine-readable rejection reason
        index: Position of the offending operation, or None for batch-level
               errors (empty batch, too many operations)

    Example:
        ```python
        try:
            report = await manager.run_batch(operations)
        except BatchValidationError as e:
            logger.error(f"Batch rejected ({e.reason.value}) at index {e.index}: {e}")
        ```
    """

    def __init__(self, message: str, reason: ValidationReason, index: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.reason = reason
        self.index = index

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.reason.value,
            "message": self.message,
            "index": self.index
        }
