"""
Example Usage of Bulk Operations

Demonstrates how to use the BulkManager class with custom configuration,
both failure-handling modes, transaction previews and timing, against the
in-memory document gateway so that no ERP backend is needed.
"""

import asyncio
import logging
import sys
import os

# Add parent directory to path so the root packages resolve when this file is run directly
current_dir = os.path.dirname(os.path.abspath(__file__))
parent_dir = os.path.dirname(current_dir)
if parent_dir not in sys.path:
    sys.path.insert(0, parent_dir)

from document_gateway import (
    DocumentGatewayError,
    ErrorKind,
    InMemoryDocumentGateway,
    LifecycleStatus
)

# Import from the module (using the public API)
from bulk_operations import (
    BulkManager,
    BulkOperationConfig,
    BatchReport,
    BatchValidationError,
    CreateOperation,
    SubmitOperation,
    UpdateOperation
)

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def log_report(report: BatchReport) -> None:
    logger.info(f"Status: {report.status.value}")
    logger.info(f"Completed: {report.completed_count}, failed: {report.failed_count}, "
                f"rolled back: {report.rolled_back}")
    for outcome in report.failed_outcomes:
        logger.warning(f"  Operation {outcome.index} failed ({outcome.error_kind}): {outcome.error_message}")


async def demonstrate_best_effort(manager: BulkManager, gateway: InMemoryDocumentGateway):
    """Every operation is attempted; failures do not stop the batch."""
    logger.info("\n=== Best-Effort Batch ===")

    operations = [
        CreateOperation(resource_type="Customer", document={"customer_name": "Globex"}),
        UpdateOperation(resource_type="Customer", identifier="CUST-MISSING", patch={"customer_group": "Retail"}),
        {"type": "create", "doctype": "Customer", "doc": {"customer_name": "Initech"}},
    ]

    report = await manager.run_batch(operations, rollback_on_failure=False)
    log_report(report)
    logger.info(f"Customers stored: {gateway.count('Customer')}")


async def demonstrate_all_or_nothing(manager: BulkManager, gateway: InMemoryDocumentGateway):
    """The first failure stops the batch and earlier creations are deleted."""
    logger.info("\n=== All-or-Nothing Batch ===")

    gateway.seed("Sales Invoice", {"name": "SINV-0001", "customer": "CUST-00001"}, status=LifecycleStatus.SUBMITTED)
    before = gateway.count("Lead")

    operations = [
        CreateOperation(resource_type="Lead", document={"lead_name": "Jane Doe"}),
        CreateOperation(resource_type="Lead", document={"lead_name": "John Roe"}),
        SubmitOperation(resource_type="Sales Invoice", identifier="SINV-0001"),
        CreateOperation(resource_type="Lead", document={"lead_name": "Never Created"}),
    ]

    report = await manager.run_batch(operations, rollback_on_failure=True)
    log_report(report)
    logger.info(f"Leads before: {before}, after: {gateway.count('Lead')}")


async def demonstrate_gateway_outage(manager: BulkManager, gateway: InMemoryDocumentGateway):
    """A failing backend call is reported inside the batch report."""
    logger.info("\n=== Backend Outage ===")

    gateway.inject_failure(
        "create",
        DocumentGatewayError("Service Unavailable", ErrorKind.SERVER_ERROR, status_code=503),
        resource_type="ToDo"
    )
    report = await manager.run_batch(
        [{"type": "create", "doctype": "ToDo", "doc": {"description": "Call supplier"}}]
    )
    log_report(report)


async def demonstrate_validation_errors(manager: BulkManager):
    """Structurally invalid batches are rejected before any backend call."""
    logger.info("\n=== Validation Errors ===")

    invalid_batches = [
        [],
        [{"type": "archive", "doctype": "Customer", "name": "CUST-00001"}],
        [{"type": "update", "doctype": "Customer", "name": "CUST-00001"}],
    ]
    for operations in invalid_batches:
        try:
            await manager.run_batch(operations)
        except BatchValidationError as e:
            logger.info(f"Rejected: {e.to_dict()}")


async def demonstrate_preview(manager: BulkManager):
    """Server-side validation without saving."""
    logger.info("\n=== Transaction Preview ===")

    preview = await manager.preview_transaction("Customer", {"customer_group": "Retail", "grand_total": 1200})
    logger.info(f"Valid: {preview.valid}")
    for issue in preview.issues:
        logger.info(f"  [{issue.severity.value}] {issue.field}: {issue.message}")
    if preview.estimated_impact:
        logger.info(f"Estimated impact: {preview.estimated_impact.model_dump()}")


def demonstrate_performance_monitoring(manager: BulkManager):
    """Demonstrate timing of bulk runs."""
    logger.info("\n=== Performance Monitoring ===")

    summary = manager.get_timing_summary()
    if summary:
        logger.info(f"Runs: {summary.total_runs}")
        logger.info(f"Average time: {summary.average_execution_time*1000:.2f}ms")
        logger.info(f"Max time: {summary.max_execution_time*1000:.2f}ms")


async def main():
    """Main demonstration function."""
    print("=" * 60)
    print("Starting Bulk Operations Example")
    print("=" * 60)

    config = BulkOperationConfig(
        max_operations=50,
        rollback_on_failure=True,
        operation_timeout=10.0,
        enable_timing=True
    )
    logger.info(f"Configuration created: {config.to_dict()}")

    gateway = InMemoryDocumentGateway(required_fields={"Customer": ["customer_name"]})
    manager = BulkManager(gateway, config=config)

    await demonstrate_best_effort(manager, gateway)
    await demonstrate_all_or_nothing(manager, gateway)
    await demonstrate_gateway_outage(manager, gateway)
    await demonstrate_validation_errors(manager)
    await demonstrate_preview(manager)
    demonstrate_performance_monitoring(manager)

    logger.info(f"\nGateway calls made: {len(gateway.calls)}")
    print("=" * 60)
    print("Bulk Operations Example Completed")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
