"""
Compensation Planner & Rollback Executor

Undoes the trivially reversible part of a failed all-or-nothing batch.
Only creations have a defined inverse: deleting the document the creation
returned. Updates, deletes and lifecycle transitions are left as they are.

Rollback is best-effort: each compensating delete is attempted on its own,
and a failed delete is logged without stopping the remaining ones.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from document_gateway import DocumentGateway, DocumentGatewayError, ErrorKind
from bulk_operations.models.entities import DeleteOperation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreatedDocument:
    """
    A document created by the current batch.

    Attributes:
        index: Position of the create operation in the batch
        resource_type: Resource type the document was created in
        identifier: Identifier returned by the backend
    """
    index: int
    resource_type: str
    identifier: str


@dataclass
class RollbackSummary:
    """
    What a rollback pass did.

    Kept for logging; the batch report only exposes that a rollback ran.
    """
    attempted: int = 0
    compensated: List[CreatedDocument] = field(default_factory=list)
    failed: List[Tuple[CreatedDocument, str]] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failed


class CompensationPlanner:
    """
    Computes inverse actions for completed work.
    """

    @staticmethod
    def plan(created: List[CreatedDocument]) -> List[Tuple[CreatedDocument, DeleteOperation]]:
        """
        Pop the creations stack into compensating deletes.

        The stack is consumed; the most recent creation is undone first.

        Args:
            created: Creations in completion order.

        Returns:
            (creation, delete) pairs in reverse completion order.
        """
        steps = []
        while created:
            document = created.pop()
            steps.append((
                document,
                DeleteOperation(resource_type=document.resource_type, identifier=document.identifier)
            ))
        return steps


class RollbackExecutor:
    """
    Applies compensating deletes through the gateway.
    """

    def __init__(self, gateway: DocumentGateway, operation_timeout: Optional[float] = None):
        """
        Args:
            gateway: Gateway used to issue the compensating deletes
            operation_timeout: Optional timeout in seconds for each delete
        """
        self._gateway = gateway
        self._operation_timeout = operation_timeout

    async def rollback(self, created: List[CreatedDocument]) -> RollbackSummary:
        """
        Undo every creation on the stack, most recent first.

        Never raises for gateway failures; they are logged and recorded in
        the summary.

        Args:
            created: Creations stack in completion order; consumed.

        Returns:
            RollbackSummary describing which compensations succeeded.
        """
        summary = RollbackSummary()
        for document, delete in CompensationPlanner.plan(created):
            summary.attempted += 1
            try:
                await self._delete(delete)
                summary.compensated.append(document)
                logger.info(
                    f"[rollback] Deleted {delete.resource_type} '{delete.identifier}' "
                    f"created by operation {document.index}"
                )
            except Exception as e:
                message = e.message if isinstance(e, DocumentGatewayError) else (str(e) or type(e).__name__)
                summary.failed.append((document, message))
                logger.error(
                    f"[rollback] Failed to delete {delete.resource_type} '{delete.identifier}' "
                    f"created by operation {document.index}: {message}"
                )

        if summary.failed:
            logger.warning(
                f"[rollback] Completed with {len(summary.failed)}/{summary.attempted} "
                f"compensations failing"
            )
        return summary

    async def _delete(self, delete: DeleteOperation) -> None:
        call = self._gateway.delete(delete.resource_type, delete.identifier)
        if not self._operation_timeout:
            await call
            return
        try:
            await asyncio.wait_for(call, timeout=self._operation_timeout)
        except asyncio.TimeoutError:
            raise DocumentGatewayError(
                f"Compensating delete exceeded timeout of {self._operation_timeout}s",
                ErrorKind.TIMEOUT
            )
