"""
Document Gateway Exceptions

Defines the classified error raised by every Remote Document Gateway
implementation, plus the mapping from HTTP status codes to error kinds.

Callers that only need a message can use str(error); callers that need to
react to the failure class can switch on error.kind.
"""

from enum import Enum
from typing import Any, Dict, Optional

from erp_ops_exceptions import ErpOpsError


class ErrorKind(str, Enum):
    """
    Stable classification tags for gateway failures.

    Kinds:
        AUTH_FAILED: Credentials missing or rejected
        PERMISSION_DENIED: Authenticated user may not perform the action
        NOT_FOUND: Resource type or document does not exist
        FIELD_ERROR: Backend rejected the document's field values
        ALREADY_IN_STATE: Document is already in the requested lifecycle state
        CONFLICT: Action conflicts with the document's current state
        RATE_LIMITED: Backend throttled the request
        SERVER_ERROR: Backend failed while handling the request
        NETWORK_ERROR: Request never got a response (connection, protocol)
        TIMEOUT: Request exceeded its time budget
    """
    AUTH_FAILED = "AUTH_FAILED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    FIELD_ERROR = "FIELD_ERROR"
    ALREADY_IN_STATE = "ALREADY_IN_STATE"
    CONFLICT = "CONFLICT"
    RATE_LIMITED = "RATE_LIMITED"
    SERVER_ERROR = "SERVER_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"


_STATUS_TO_KIND = {
    400: ErrorKind.FIELD_ERROR,
    401: ErrorKind.AUTH_FAILED,
    403: ErrorKind.PERMISSION_DENIED,
    404: ErrorKind.NOT_FOUND,
    409: ErrorKind.CONFLICT,
    417: ErrorKind.FIELD_ERROR,  # Frappe answers ValidationError with 417
    422: ErrorKind.FIELD_ERROR,
    429: ErrorKind.RATE_LIMITED,
}


class DocumentGatewayError(ErpOpsError):
    """
    Raised when a single gateway call fails.

    Attributes:
        message: Human-readable error message, taken from the backend when it
                 supplied one
        kind: Classification of the failure
        status_code: HTTP status code, if a response was received
        retryable: Whether the request provably had no effect and may be
                   repeated safely

    Example:
        ```python
        try:
            await gateway.set_lifecycle_status("Sales Invoice", "SINV-0001", LifecycleStatus.SUBMITTED)
        except DocumentGatewayError as e:
            if e.kind is ErrorKind.ALREADY_IN_STATE:
                logger.info("Invoice was already submitted")
            else:
                raise
        ```
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind,
        status_code: Optional[int] = None,
        retryable: bool = False
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status_code = status_code
        self.retryable = retryable

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.kind.value, "message": self.message}


def classify_status(status_code: int) -> ErrorKind:
    """Map an HTTP error status to an ErrorKind."""
    if status_code >= 500:
        return ErrorKind.SERVER_ERROR
    return _STATUS_TO_KIND.get(status_code, ErrorKind.FIELD_ERROR)


def is_retryable_status(status_code: int) -> bool:
    """
    Statuses that guarantee the request was not applied.

    429 and 503 are rejections issued before the backend touches any
    document. Other 5xx answers may arrive after a write committed.
    """
    return status_code in (429, 503)


def extract_error_message(status_code: int, body: Any) -> str:
    """
    Pull the most specific human-readable message out of an error body.

    Frappe error bodies carry `message`, `exception` or `exc_type`; anything
    else falls back to the bare status.
    """
    if isinstance(body, dict):
        for key in ("message", "exception", "exc_type"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return f"HTTP {status_code}"
