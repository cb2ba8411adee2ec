"""
Sequential Executor

Drives a validated batch through the document gateway one operation at a
time, in input order, recording one outcome per attempted operation.

Two failure-handling modes are supported:
- best-effort (rollback_on_failure=False): every operation is attempted
  exactly once regardless of earlier failures
- all-or-nothing (rollback_on_failure=True): the first failure stops the
  batch and every document created earlier in it is deleted again

Gateway failures never escape the executor; they become failed outcomes.
"""

import asyncio
import logging
from typing import Any, Awaitable, List, Optional, Sequence

from document_gateway import (
    DocumentGateway,
    DocumentGatewayError,
    ErrorKind,
    LifecycleStatus,
    identifier_of
)
from bulk_operations.bulk_ops_config import BulkOperationConfig
from bulk_operations.core.aggregator import aggregate_report
from bulk_operations.core.compensation import CreatedDocument, RollbackExecutor
from bulk_operations.models.entities import (
    BatchReport,
    CreateOperation,
    OperationBase,
    OperationOutcome,
    OperationType
)

logger = logging.getLogger(__name__)

_LIFECYCLE_TARGETS = {
    OperationType.SUBMIT: LifecycleStatus.SUBMITTED,
    OperationType.CANCEL: LifecycleStatus.CANCELLED,
}


class SequentialExecutor:
    """
    Executes validated operations strictly in order.

    Operation i+1 is not issued until operation i's outcome is known, so later
    operations may rely on the effects of earlier ones and the rollback phase
    knows the exact completion order of creations.
    """

    def __init__(
        self,
        gateway: DocumentGateway,
        config: Optional[BulkOperationConfig] = None,
        rollback_executor: Optional[RollbackExecutor] = None
    ):
        """
        Args:
            gateway: Gateway every operation is dispatched to
            config: Bulk configuration (per-call timeout). Defaults if None.
            rollback_executor: Executor for compensating deletes. Built from
                               the gateway and config if None.
        """
        self._gateway = gateway
        self._config = config or BulkOperationConfig()
        self._rollback_executor = rollback_executor or RollbackExecutor(
            gateway, operation_timeout=self._config.operation_timeout
        )

    async def execute(
        self,
        operations: Sequence[OperationBase],
        rollback_on_failure: bool
    ) -> BatchReport:
        """
        Execute a validated batch.

        Args:
            operations: Typed operations, already validated
            rollback_on_failure: True for all-or-nothing mode, False for
                                 best-effort mode

        Returns:
            BatchReport with one outcome per attempted operation.
        """
        outcomes: List[OperationOutcome] = []
        created: List[CreatedDocument] = []
        rolled_back = False

        for index, operation in enumerate(operations):
            try:
                payload = await self._dispatch(operation)
            except Exception as e:
                outcomes.append(self._failure_outcome(index, operation, e))
                if rollback_on_failure:
                    logger.info(
                        f"[execute] Starting rollback after failure at operation {index}; "
                        f"{len(created)} creation(s) to undo, "
                        f"{len(operations) - index - 1} operation(s) not attempted"
                    )
                    summary = await self._rollback_executor.rollback(created)
                    logger.info(
                        f"[execute] Rollback finished: {len(summary.compensated)}/{summary.attempted} "
                        f"creation(s) undone"
                    )
                    rolled_back = True
                    break
                continue

            outcomes.append(OperationOutcome.success(index, payload))
            if isinstance(operation, CreateOperation):
                self._track_creation(created, index, operation, payload)

        return aggregate_report(outcomes, rolled_back)

    async def _dispatch(self, operation: OperationBase) -> Any:
        """Issue the gateway primitive matching the operation's variant."""
        op_type = operation.operation_type
        if op_type is OperationType.CREATE:
            call = self._gateway.create(operation.resource_type, operation.document)
        elif op_type is OperationType.UPDATE:
            call = self._gateway.update(operation.resource_type, operation.identifier, operation.patch)
        elif op_type is OperationType.DELETE:
            call = self._gateway.delete(operation.resource_type, operation.identifier)
        else:
            call = self._gateway.set_lifecycle_status(
                operation.resource_type, operation.identifier, _LIFECYCLE_TARGETS[op_type]
            )
        return await self._with_timeout(call)

    async def _with_timeout(self, call: Awaitable[Any]) -> Any:
        timeout = self._config.operation_timeout
        if not timeout:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=timeout)
        except asyncio.TimeoutError:
            raise DocumentGatewayError(
                f"Operation exceeded timeout of {timeout}s",
                ErrorKind.TIMEOUT
            )

    @staticmethod
    def _failure_outcome(index: int, operation: OperationBase, error: Exception) -> OperationOutcome:
        description = f"{operation.operation_type.value} {operation.resource_type}"
        if isinstance(error, DocumentGatewayError):
            message, kind = error.message, error.kind
            logger.error(f"[execute] Operation {index} ({description}) failed: {message}")
        else:
            message, kind = str(error) or type(error).__name__, None
            logger.exception(f"[execute] Unexpected fault in operation {index} ({description}): {message}")
        return OperationOutcome.failure(index, message, kind)

    @staticmethod
    def _track_creation(
        created: List[CreatedDocument],
        index: int,
        operation: CreateOperation,
        payload: Any
    ) -> None:
        identifier = identifier_of(payload)
        if identifier is None:
            logger.warning(
                f"[execute] Create at operation {index} on '{operation.resource_type}' returned "
                f"no identifier; it cannot be rolled back"
            )
            return
        created.append(CreatedDocument(index, operation.resource_type, identifier))
