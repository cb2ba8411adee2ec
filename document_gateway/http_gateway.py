"""
HTTP Document Gateway

Implements the Remote Document Gateway on top of the backend's REST resource
API using httpx. Each primitive maps to exactly one HTTP request; HTTP and
transport failures are classified into DocumentGatewayError.

Typical usage from external projects:

    from config import ConnectionSettings
    from document_gateway import HttpDocumentGateway

    settings = ConnectionSettings(
        base_url="https://erp.example.com",
        api_key="...",
        api_secret="..."
    )
    async with HttpDocumentGateway(settings) as gateway:
        invoice = await gateway.create("Sales Invoice", {"customer": "ACME"})
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential
)

from config import ConnectionSettings
from erp_ops_exceptions import ConfigurationError
from document_gateway.base import DocumentGateway, LifecycleStatus
from document_gateway.gateway_exceptions import (
    DocumentGatewayError,
    ErrorKind,
    classify_status,
    extract_error_message,
    is_retryable_status
)
from utils import redact_sensitive_data

logger = logging.getLogger(__name__)

RESOURCE_PREFIX = "/api/resource"
VALIDATE_METHOD_PATH = "/api/method/frappe.model.document.validate_doc"

# Upper bound in seconds for a single backoff interval
MAX_RETRY_WAIT = 10.0


def _is_retryable(exception: BaseException) -> bool:
    return isinstance(exception, DocumentGatewayError) and exception.retryable


class HttpDocumentGateway(DocumentGateway):
    """
    Remote Document Gateway speaking the Frappe/ERPNext REST resource API.

    Requests are authenticated with a `token <key>:<secret>` header. Only
    failures that guarantee the request had no effect (connection could not
    be established, 429, 503) are retried, with exponential backoff driven by
    tenacity; everything else is raised on the first attempt so that a
    create is never issued twice.
    """

    def __init__(
        self,
        settings: Optional[ConnectionSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the gateway.

        Args:
            settings: Connection settings. If None, read from the environment.
            transport: Optional httpx transport, used to plug in a mock
                      transport in tests.

        Raises:
            ConfigurationError: If the API key or secret is missing.
        """
        self._settings = settings if settings is not None else ConnectionSettings()
        if not self._settings.has_credentials:
            raise ConfigurationError(
                "API key and secret are required to connect to the ERP backend"
            )

        api_key = self._settings.api_key.get_secret_value()
        api_secret = self._settings.api_secret.get_secret_value()

        self._client = httpx.AsyncClient(
            base_url=self._settings.base_url,
            timeout=self._settings.request_timeout,
            verify=self._settings.verify_ssl,
            transport=transport,
            headers={
                "Authorization": f"token {api_key}:{api_secret}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )

        logger.info(
            f"HttpDocumentGateway initialized: "
            f"{redact_sensitive_data({'base_url': self._settings.base_url, 'api_key': api_key, 'api_secret': api_secret})}"
        )

    async def __aenter__(self) -> "HttpDocumentGateway":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()
        logger.debug("HttpDocumentGateway closed")

    # Primitives

    async def create(self, resource_type: str, document: Mapping[str, Any]) -> Dict[str, Any]:
        body = await self._request("POST", self._resource_path(resource_type), {"data": dict(document)})
        return self._unwrap_data(body, "create", resource_type)

    async def update(
        self,
        resource_type: str,
        identifier: str,
        patch: Mapping[str, Any]
    ) -> Dict[str, Any]:
        body = await self._request(
            "PUT", self._resource_path(resource_type, identifier), {"data": dict(patch)}
        )
        return self._unwrap_data(body, "update", resource_type)

    async def delete(self, resource_type: str, identifier: str) -> None:
        await self._request("DELETE", self._resource_path(resource_type, identifier))

    async def set_lifecycle_status(
        self,
        resource_type: str,
        identifier: str,
        target: LifecycleStatus
    ) -> Dict[str, Any]:
        body = await self._request(
            "PUT",
            self._resource_path(resource_type, identifier),
            {"data": {"docstatus": int(target)}}
        )
        return self._unwrap_data(body, "set_lifecycle_status", resource_type)

    async def validate_document(
        self,
        resource_type: str,
        document: Mapping[str, Any]
    ) -> Dict[str, Any]:
        body = await self._request("POST", VALIDATE_METHOD_PATH, {
            "doctype": resource_type,
            "doc": json.dumps(dict(document), default=str),
            "action": "validate"
        })
        if isinstance(body, dict):
            result = body.get("message", body)
            if isinstance(result, dict):
                return result
        return {}

    # Internals

    @staticmethod
    def _resource_path(resource_type: str, identifier: Optional[str] = None) -> str:
        path = f"{RESOURCE_PREFIX}/{quote(resource_type, safe='')}"
        if identifier is not None:
            path += f"/{quote(str(identifier), safe='')}"
        return path

    @staticmethod
    def _unwrap_data(body: Any, primitive: str, resource_type: str) -> Dict[str, Any]:
        if isinstance(body, dict) and isinstance(body.get("data"), dict):
            return body["data"]
        raise DocumentGatewayError(
            f"Malformed response from {primitive} on '{resource_type}': missing 'data' object",
            ErrorKind.SERVER_ERROR
        )

    async def _request(self, method: str, path: str, json_body: Optional[Dict[str, Any]] = None) -> Any:
        """Send one logical request, retrying only failures that had no effect."""
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._settings.retry_count + 1),
            wait=wait_exponential(multiplier=self._settings.retry_interval, max=MAX_RETRY_WAIT),
            retry=retry_if_exception(_is_retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True
        )
        async for attempt in retrying:
            with attempt:
                return await self._send_once(method, path, json_body)

    async def _send_once(self, method: str, path: str, json_body: Optional[Dict[str, Any]]) -> Any:
        logger.debug(f"{method} {path}")
        try:
            response = await self._client.request(method, path, json=json_body)
        except httpx.TimeoutException as e:
            # Connect and pool timeouts fire before anything is sent
            retryable = isinstance(e, (httpx.ConnectTimeout, httpx.PoolTimeout))
            raise DocumentGatewayError(
                f"Request {method} {path} timed out: {e}",
                ErrorKind.TIMEOUT,
                retryable=retryable
            ) from e
        except httpx.TransportError as e:
            raise DocumentGatewayError(
                f"Network error on {method} {path}: {e}",
                ErrorKind.NETWORK_ERROR,
                retryable=isinstance(e, httpx.ConnectError)
            ) from e

        body = self._decode(response)
        if response.is_error:
            status = response.status_code
            message = extract_error_message(status, body)
            logger.debug(f"{method} {path} failed with HTTP {status}: {message}")
            raise DocumentGatewayError(
                message,
                classify_status(status),
                status_code=status,
                retryable=is_retryable_status(status)
            )
        return body

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None
