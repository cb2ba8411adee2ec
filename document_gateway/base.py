"""
Remote Document Gateway Contract

Defines the four mutating primitives the bulk executor relies on, keyed by
(resource_type, identifier), plus server-side validation used by
transaction previews. Every primitive is asynchronous and either returns the
backend's payload or raises DocumentGatewayError.
"""

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Any, Dict, Mapping, Optional

# Field carrying a document's unique key within its resource type
IDENTIFIER_FIELD = "name"


class LifecycleStatus(IntEnum):
    """
    Document lifecycle states, encoded as the backend's docstatus values.
    """
    DRAFT = 0
    SUBMITTED = 1
    CANCELLED = 2


class DocumentGateway(ABC):
    """
    Abstract interface to the remote document store.

    Implementations must be safe to share between concurrent callers; they
    hold no per-batch state. Instances are passed explicitly to the
    components that need them.
    """

    @abstractmethod
    async def create(self, resource_type: str, document: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Create a document.

        Returns:
            The stored document, including its generated identifier under
            IDENTIFIER_FIELD.
        """

    @abstractmethod
    async def update(
        self,
        resource_type: str,
        identifier: str,
        patch: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """Apply a partial patch and return the updated document."""

    @abstractmethod
    async def delete(self, resource_type: str, identifier: str) -> None:
        """Delete a document."""

    @abstractmethod
    async def set_lifecycle_status(
        self,
        resource_type: str,
        identifier: str,
        target: LifecycleStatus
    ) -> Dict[str, Any]:
        """Move a document to the target lifecycle state and return it."""

    @abstractmethod
    async def validate_document(
        self,
        resource_type: str,
        document: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """
        Ask the backend to validate a document without saving it.

        Returns:
            The raw validation result; may contain `errors`, `warnings`,
            `messages` and `valid` keys.
        """

    async def aclose(self) -> None:
        """Release any resources held by the gateway."""


def identifier_of(payload: Any) -> Optional[str]:
    """Return the document identifier from a gateway payload, if present."""
    if isinstance(payload, Mapping):
        value = payload.get(IDENTIFIER_FIELD)
        if value is not None and str(value).strip():
            return str(value)
    return None
