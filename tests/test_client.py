"""
End-to-end tests for ErpClient: configuration wiring and a rolled-back batch
over the HTTP gateway.
"""

import json

import httpx
import pytest

from client import ErpClient
from config import ErpSettings
from bulk_operations import OperationStatus
from document_gateway import ErrorKind
from erp_ops_exceptions import ConfigurationError


def _settings(**bulk):
    return ErpSettings(
        connection={"base_url": "https://erp.example.com", "api_key": "k", "api_secret": "s", "retry_count": 0},
        bulk=bulk
    )


class FakeBackend:
    """Minimal resource API: creates succeed, updates are rejected."""

    def __init__(self):
        self.requests = []
        self.counter = 0

    def __call__(self, request):
        self.requests.append((request.method, request.url.path))
        if request.method == "POST":
            self.counter += 1
            document = json.loads(request.content)["data"]
            return httpx.Response(200, json={"data": {**document, "name": f"TD-{self.counter}", "docstatus": 0}})
        if request.method == "PUT":
            return httpx.Response(417, json={"exception": "frappe.exceptions.ValidationError: Status is invalid"})
        if request.method == "DELETE":
            return httpx.Response(202, json={"message": "ok"})
        return httpx.Response(405)


def test_rejects_unknown_config_type():
    with pytest.raises(ConfigurationError):
        ErpClient(config=42)


def test_requires_credentials():
    settings = ErpSettings(connection={"base_url": "https://erp.example.com", "api_key": "k"})
    with pytest.raises(ConfigurationError):
        ErpClient(settings)


@pytest.mark.asyncio
async def test_bulk_settings_reach_the_manager():
    client = ErpClient(_settings(max_operations=5, rollback_on_failure=False), transport=httpx.MockTransport(FakeBackend()))
    try:
        assert client.bulk.config.max_operations == 5
        assert client.bulk.config.rollback_on_failure is False
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_failed_batch_is_rolled_back_over_http():
    backend = FakeBackend()
    operations = [
        {"type": "create", "doctype": "ToDo", "doc": {"description": "first"}},
        {"type": "create", "doctype": "ToDo", "doc": {"description": "second"}},
        {"type": "update", "doctype": "ToDo", "name": "TD-1", "patch": {"status": "Bogus"}},
        {"type": "delete", "doctype": "ToDo", "name": "TD-1"},
    ]

    async with ErpClient(_settings(), transport=httpx.MockTransport(backend)) as client:
        report = await client.bulk.run_batch(operations, rollback_on_failure=True)

    assert report.status is OperationStatus.ROLLED_BACK
    assert report.outcomes[2].error_kind is ErrorKind.FIELD_ERROR
    assert report.outcomes[2].error_message == "frappe.exceptions.ValidationError: Status is invalid"
    assert backend.requests == [
        ("POST", "/api/resource/ToDo"),
        ("POST", "/api/resource/ToDo"),
        ("PUT", "/api/resource/ToDo/TD-1"),
        ("DELETE", "/api/resource/ToDo/TD-2"),
        ("DELETE", "/api/resource/ToDo/TD-1"),
    ]
