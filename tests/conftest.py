"""
Shared fixtures for the ERP_Ops test suite.

All tests run against InMemoryDocumentGateway or an httpx.MockTransport;
no live ERP backend is required.
"""

import os
import sys

import pytest

# Make the flat-layout packages importable without installation
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from document_gateway import InMemoryDocumentGateway, LifecycleStatus  # noqa: E402
from bulk_operations import BulkManager, BulkOperationConfig  # noqa: E402


@pytest.fixture
def gateway():
    """Empty in-memory gateway."""
    return InMemoryDocumentGateway()


@pytest.fixture
def manager(gateway):
    """BulkManager over the in-memory gateway with default configuration."""
    return BulkManager(gateway, config=BulkOperationConfig())


@pytest.fixture
def seeded_gateway():
    """
    Gateway holding one draft customer, one draft invoice and one submitted
    invoice.
    """
    gateway = InMemoryDocumentGateway()
    gateway.seed("Customer", {"name": "CUST-EXIST", "customer_name": "Existing"})
    gateway.seed("Sales Invoice", {"name": "SINV-DRAFT", "customer": "CUST-EXIST"})
    gateway.seed("Sales Invoice", {"name": "SINV-SUBMITTED", "customer": "CUST-EXIST"},
                 status=LifecycleStatus.SUBMITTED)
    return gateway
