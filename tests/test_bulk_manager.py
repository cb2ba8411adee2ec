"""
Tests for BulkManager: the validation gate, mode selection, timing and
transaction previews.
"""

import pytest

from bulk_operations import (
    BatchValidationError,
    BulkManager,
    BulkOperationConfig,
    CreateOperation,
    IssueSeverity,
    OperationStatus,
    ValidationReason
)
from document_gateway import DocumentGatewayError, ErrorKind, InMemoryDocumentGateway


def _creates(count):
    return [
        {"type": "create", "doctype": "ToDo", "doc": {"description": f"task {i}"}}
        for i in range(count)
    ]


class StubValidationGateway(InMemoryDocumentGateway):
    """In-memory gateway returning a canned validate_document response."""

    def __init__(self, response):
        super().__init__()
        self.response = response
        self.validated = []

    async def validate_document(self, resource_type, document):
        self.validated.append((resource_type, dict(document)))
        return self.response


class TestValidationGate:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operations, reason, index", [
        ([], ValidationReason.BATCH_EMPTY, None),
        (_creates(101), ValidationReason.TOO_MANY_OPERATIONS, None),
        (_creates(3) + [{"type": "update", "doctype": "ToDo", "name": "TD-1"}],
         ValidationReason.PATCH_REQUIRED, 3),
        (_creates(2) + [{"type": "archive", "doctype": "ToDo", "name": "TD-1"}],
         ValidationReason.INVALID_OPERATION_TYPE, 2),
    ])
    async def test_rejected_batch_makes_no_gateway_call(self, gateway, manager, operations, reason, index):
        with pytest.raises(BatchValidationError) as exc_info:
            await manager.run_batch(operations)

        assert exc_info.value.reason is reason
        assert exc_info.value.index == index
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_hundred_operations_are_accepted(self, gateway, manager):
        report = await manager.run_batch(_creates(100), rollback_on_failure=False)
        assert report.completed_count == 100
        assert gateway.count("ToDo") == 100

    @pytest.mark.asyncio
    async def test_configured_limit_is_enforced(self, gateway):
        manager = BulkManager(gateway, BulkOperationConfig(max_operations=2))
        with pytest.raises(BatchValidationError) as exc_info:
            await manager.run_batch(_creates(3))
        assert exc_info.value.reason is ValidationReason.TOO_MANY_OPERATIONS
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_mixes_raw_mappings_and_models(self, gateway, manager):
        operations = [
            CreateOperation(resource_type="ToDo", document={"name": "TD-1", "description": "a"}),
            {"type": "submit", "doctype": "ToDo", "name": "TD-1"},
        ]
        report = await manager.run_batch(operations)
        assert report.status is OperationStatus.SUCCESS
        assert gateway.get("ToDo", "TD-1")["docstatus"] == 1


class TestModeSelection:

    @pytest.mark.asyncio
    async def test_default_mode_comes_from_config(self, gateway):
        gateway.inject_failure("create", DocumentGatewayError("Server error", ErrorKind.SERVER_ERROR))
        manager = BulkManager(gateway, BulkOperationConfig(rollback_on_failure=True))

        report = await manager.run_batch(_creates(3))

        assert report.rolled_back is True
        assert len(report.outcomes) == 1

    @pytest.mark.asyncio
    async def test_explicit_mode_overrides_config(self, gateway):
        gateway.inject_failure("create", DocumentGatewayError("Server error", ErrorKind.SERVER_ERROR))
        manager = BulkManager(gateway, BulkOperationConfig(rollback_on_failure=True))

        report = await manager.run_batch(_creates(3), rollback_on_failure=False)

        assert report.rolled_back is False
        assert report.status is OperationStatus.PARTIAL
        assert [outcome.succeeded for outcome in report.outcomes] == [False, True, True]

    @pytest.mark.asyncio
    async def test_best_effort_config_default(self, gateway):
        gateway.inject_failure("create", DocumentGatewayError("Server error", ErrorKind.SERVER_ERROR), times=None)
        manager = BulkManager(gateway, BulkOperationConfig(rollback_on_failure=False))

        report = await manager.run_batch(_creates(2))

        assert report.status is OperationStatus.FAILED
        assert report.failed_count == 2


class TestTiming:

    @pytest.mark.asyncio
    async def test_runs_are_timed(self, manager):
        assert manager.get_timing_summary() is None

        await manager.run_batch(_creates(2))
        await manager.run_batch(_creates(1))

        summary = manager.get_timing_summary()
        assert summary.total_runs == 2
        assert summary.successful_runs == 2
        assert summary.max_execution_time >= summary.average_execution_time >= 0

    @pytest.mark.asyncio
    async def test_rejected_batches_are_not_timed(self, manager):
        with pytest.raises(BatchValidationError):
            await manager.run_batch([])
        assert manager.get_timing_summary() is None

    @pytest.mark.asyncio
    async def test_timing_can_be_disabled(self, gateway):
        manager = BulkManager(gateway, BulkOperationConfig(enable_timing=False))
        await manager.run_batch(_creates(1))
        assert manager.get_timing_summary() is None


class TestPreviewTransaction:

    @pytest.mark.asyncio
    async def test_clean_document(self):
        gateway = StubValidationGateway({"valid": True})

        preview = await BulkManager(gateway).preview_transaction(" Customer ", {"customer_name": "ACME"})

        assert preview.valid is True
        assert preview.issues == []
        assert preview.estimated_impact is None
        assert gateway.validated == [("Customer", {"customer_name": "ACME"})]

    @pytest.mark.asyncio
    async def test_errors_and_warnings_are_normalised(self):
        gateway = StubValidationGateway({
            "errors": [{"fieldname": "customer", "message": "Customer is mandatory"}],
            "warnings": ["Posting date is in the past"],
            "messages": [{"type": "Info", "message": "Taxes recalculated"}, "Rounded total adjusted"],
        })

        preview = await BulkManager(gateway).preview_transaction("Sales Invoice", {"grand_total": "1500.50"})

        assert preview.valid is False
        assert [issue.severity for issue in preview.issues] == [
            IssueSeverity.ERROR, IssueSeverity.WARNING, IssueSeverity.INFO, IssueSeverity.INFO
        ]
        assert preview.errors[0].field == "customer"
        assert preview.errors[0].message == "Customer is mandatory"
        assert preview.warnings == ["Posting date is in the past"]
        assert preview.estimated_impact.financial_impact == 1500.5

    @pytest.mark.asyncio
    async def test_explicit_invalid_flag_is_respected(self):
        gateway = StubValidationGateway({"valid": False})
        preview = await BulkManager(gateway).preview_transaction("Customer", {"customer_name": "ACME"})
        assert preview.valid is False

    @pytest.mark.asyncio
    async def test_impact_estimate(self):
        gateway = StubValidationGateway({})
        document = {"name": "SINV-1", "total": "n/a", "amount": 20, "workflow_state": "Approved"}

        preview = await BulkManager(gateway).preview_transaction("Sales Invoice", document)

        impact = preview.estimated_impact
        assert impact.documents_affected == 1
        assert impact.financial_impact == 20.0
        assert impact.workflow_changes == ["Approved"]

    @pytest.mark.asyncio
    async def test_uses_in_memory_required_fields(self):
        gateway = InMemoryDocumentGateway(required_fields={"Customer": ["customer_name", "customer_group"]})

        preview = await BulkManager(gateway).preview_transaction("Customer", {"customer_name": "ACME"})

        assert preview.valid is False
        assert [issue.field for issue in preview.errors] == ["customer_group"]
        assert gateway.count("Customer") == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("resource_type, document, reason", [
        ("", {"a": 1}, ValidationReason.RESOURCE_TYPE_REQUIRED),
        ("   ", {"a": 1}, ValidationReason.RESOURCE_TYPE_REQUIRED),
        ("Customer", {}, ValidationReason.DOCUMENT_REQUIRED),
        ("Customer", ["customer_name"], ValidationReason.DOCUMENT_REQUIRED),
    ])
    async def test_invalid_arguments_are_rejected(self, gateway, manager, resource_type, document, reason):
        with pytest.raises(BatchValidationError) as exc_info:
            await manager.preview_transaction(resource_type, document)
        assert exc_info.value.reason is reason
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_gateway_errors_propagate(self, gateway, manager):
        gateway.inject_failure("validate_document", DocumentGatewayError("Not permitted", ErrorKind.PERMISSION_DENIED))
        with pytest.raises(DocumentGatewayError) as exc_info:
            await manager.preview_transaction("Customer", {"customer_name": "ACME"})
        assert exc_info.value.kind is ErrorKind.PERMISSION_DENIED
