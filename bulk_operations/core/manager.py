"""
Core Bulk Manager

Provides the primary interface for bulk operations against the remote
document store: validation, sequential execution with optional compensation,
and transaction previews.

Typical usage from external projects:

    from document_gateway import HttpDocumentGateway
    from bulk_operations import BulkManager, BulkOperationConfig

    gateway = HttpDocumentGateway(settings.connection)
    manager = BulkManager(gateway, config=BulkOperationConfig(operation_timeout=20.0))

    report = await manager.run_batch(
        [
            {"type": "create", "doctype": "Customer", "doc": {"customer_name": "ACME"}},
            {"type": "submit", "doctype": "Sales Invoice", "name": "SINV-0001"},
        ],
        rollback_on_failure=True
    )
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from document_gateway import DocumentGateway
from bulk_operations.bulk_ops_config import BulkOperationConfig
from bulk_operations.bulk_ops_exceptions import BatchValidationError, ValidationReason
from bulk_operations.core.executor import SequentialExecutor
from bulk_operations.core.validator import BatchValidator
from bulk_operations.models.entities import (
    BatchReport,
    EstimatedImpact,
    IssueSeverity,
    OperationBase,
    PreviewIssue,
    TransactionPreview
)
from bulk_operations.utils.timing import PerformanceTimer, TimingSummary

logger = logging.getLogger(__name__)

RUN_BATCH_TIMER = "run_batch"

_FINANCIAL_FIELDS = ("grand_total", "total", "amount")


class BulkManager:
    """
    Entry point for bulk transaction execution.

    The gateway is injected, so a manager never reaches into process-wide
    session state and several managers with different gateways can coexist.
    A manager holds no per-batch state; concurrent run_batch calls do not
    interact locally, although the remote store offers them no isolation
    from each other.
    """

    def __init__(self, gateway: DocumentGateway, config: Optional[BulkOperationConfig] = None):
        """
        Initialize BulkManager with injected dependencies.

        Args:
            gateway: Remote Document Gateway used for every call
            config: Bulk configuration. If None, uses default settings.
        """
        self._gateway = gateway
        self._config = config or BulkOperationConfig()
        self._executor = SequentialExecutor(gateway, self._config)
        self._timer = PerformanceTimer(enable_logging=self._config.enable_timing)

        logger.debug(
            f"BulkManager initialized with max_operations={self._config.max_operations}, "
            f"rollback_on_failure={self._config.rollback_on_failure}"
        )

    @property
    def config(self) -> BulkOperationConfig:
        return self._config

    async def run_batch(
        self,
        operations: Sequence[Union[OperationBase, Dict[str, Any]]],
        rollback_on_failure: Optional[bool] = None
    ) -> BatchReport:
        """
        Validate and execute a batch of operations.

        Args:
            operations: Ordered operations, as operation models or raw
                        mappings
            rollback_on_failure: True stops at the first failure and deletes
                                 documents created earlier in the batch; False
                                 attempts every operation. None uses the
                                 configured default.

        Returns:
            BatchReport with one outcome per attempted operation. Gateway
            failures are reported inside it, never raised.

        Raises:
            BatchValidationError: If the batch is structurally invalid. No
                                  gateway call has been made in that case.
        """
        validated = BatchValidator.validate(operations, max_operations=self._config.max_operations)
        if rollback_on_failure is None:
            rollback_on_failure = self._config.rollback_on_failure

        logger.info(
            f"[run_batch] Running {len(validated)} operation(s), "
            f"rollback_on_failure={rollback_on_failure}, "
            f"types={[operation.operation_type.value for operation in validated]}"
        )

        if not self._config.enable_timing:
            report = await self._executor.execute(validated, rollback_on_failure)
        else:
            async with self._timer.time_operation(
                RUN_BATCH_TIMER,
                metadata={"operation_count": len(validated), "rollback_on_failure": rollback_on_failure}
            ) as timing:
                report = await self._executor.execute(validated, rollback_on_failure)
                timing.metadata["status"] = report.status.value

        logger.info(
            f"[run_batch] Completed: total={len(validated)}, completed={report.completed_count}, "
            f"failed={report.failed_count}, rolled_back={report.rolled_back}"
        )
        return report

    async def preview_transaction(self, resource_type: str, document: Dict[str, Any]) -> TransactionPreview:
        """
        Validate a document on the backend without saving it.

        Args:
            resource_type: Resource type the document would be created in
            document: Field values to validate

        Returns:
            TransactionPreview with issues, warnings and an impact estimate.

        Raises:
            BatchValidationError: If resource_type is blank or document is
                                  empty or not a mapping.
            DocumentGatewayError: If the backend call fails.
        """
        if not isinstance(resource_type, str) or not resource_type.strip():
            raise BatchValidationError("Resource type required", ValidationReason.RESOURCE_TYPE_REQUIRED)
        if not isinstance(document, Mapping) or not document:
            raise BatchValidationError(
                "Document data is required and must be a non-empty mapping",
                ValidationReason.DOCUMENT_REQUIRED
            )

        resource_type = resource_type.strip()
        logger.info(f"[preview] Previewing {resource_type} with fields {sorted(document)}")

        result = await self._gateway.validate_document(resource_type, document)
        preview = self._build_preview(result, document)

        logger.info(
            f"[preview] {resource_type}: valid={preview.valid}, issues={len(preview.issues)}, "
            f"warnings={len(preview.warnings)}"
        )
        return preview

    def get_timing_summary(self) -> Optional[TimingSummary]:
        """Aggregated timing of run_batch calls, or None if none were timed."""
        return self._timer.get_summary(RUN_BATCH_TIMER)

    @classmethod
    def _build_preview(cls, result: Dict[str, Any], document: Dict[str, Any]) -> TransactionPreview:
        issues: List[PreviewIssue] = []
        warnings: List[str] = []

        for error in result.get("errors") or []:
            issues.append(cls._to_issue(error, IssueSeverity.ERROR))

        for warning in result.get("warnings") or []:
            issue = cls._to_issue(warning, IssueSeverity.WARNING)
            warnings.append(issue.message)
            issues.append(issue)

        for message in result.get("messages") or []:
            severity = IssueSeverity.INFO
            if isinstance(message, Mapping):
                try:
                    severity = IssueSeverity(str(message.get("type", "info")).lower())
                except ValueError:
                    severity = IssueSeverity.INFO
            issues.append(cls._to_issue(message, severity))

        has_errors = any(issue.severity == IssueSeverity.ERROR for issue in issues)
        valid = not has_errors and result.get("valid") is not False

        impact = cls._estimate_impact(document)
        return TransactionPreview(
            valid=valid,
            issues=issues,
            warnings=warnings,
            estimated_impact=None if impact.is_empty else impact
        )

    @staticmethod
    def _to_issue(entry: Any, severity: IssueSeverity) -> PreviewIssue:
        if isinstance(entry, Mapping):
            return PreviewIssue(
                field=entry.get("field") or entry.get("fieldname"),
                message=str(entry.get("message") or entry.get("msg") or entry),
                severity=severity
            )
        return PreviewIssue(message=str(entry), severity=severity)

    @staticmethod
    def _estimate_impact(document: Dict[str, Any]) -> EstimatedImpact:
        impact = EstimatedImpact()
        if document.get("name"):
            impact.documents_affected = 1

        for field_name in _FINANCIAL_FIELDS:
            value = document.get(field_name)
            if value:
                try:
                    impact.financial_impact = float(value)
                except (TypeError, ValueError):
                    logger.debug(f"[preview] Ignoring non-numeric {field_name}={value!r}")
                    continue
                break

        if document.get("workflow_state"):
            impact.workflow_changes = [str(document["workflow_state"])]
        return impact
