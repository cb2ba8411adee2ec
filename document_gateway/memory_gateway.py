"""
In-Memory Document Gateway

Provides a self-contained implementation of the Remote Document Gateway that
keeps documents in process memory. It mirrors the backend's lifecycle rules
closely enough to exercise bulk runs without a live server, records every
call for assertions, and can be told to fail specific calls.
"""

import copy
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from document_gateway.base import IDENTIFIER_FIELD, DocumentGateway, LifecycleStatus
from document_gateway.gateway_exceptions import DocumentGatewayError, ErrorKind

logger = logging.getLogger(__name__)

DOCSTATUS_FIELD = "docstatus"


@dataclass(frozen=True)
class GatewayCall:
    """One recorded gateway invocation."""
    method: str
    resource_type: str
    identifier: Optional[str] = None


@dataclass
class _InjectedFailure:
    method: str
    error: BaseException
    resource_type: Optional[str]
    identifier: Optional[str]
    remaining: Optional[int]

    def matches(self, call: GatewayCall) -> bool:
        if self.method != call.method:
            return False
        if self.resource_type is not None and self.resource_type != call.resource_type:
            return False
        if self.identifier is not None and self.identifier != call.identifier:
            return False
        return self.remaining is None or self.remaining > 0


class InMemoryDocumentGateway(DocumentGateway):
    """
    Document gateway backed by a dictionary.

    Lifecycle rules:
        - documents are created as drafts (docstatus 0)
        - only drafts can be updated or submitted
        - only submitted documents can be cancelled
        - submitted documents cannot be deleted
        - repeating a transition raises ALREADY_IN_STATE

    Example:
        ```python
        gateway = InMemoryDocumentGateway(required_fields={"Customer": ["customer_name"]})
        gateway.inject_failure("update", DocumentGatewayError("boom", ErrorKind.SERVER_ERROR))
        ```
    """

    def __init__(self, required_fields: Optional[Mapping[str, Sequence[str]]] = None):
        """
        Args:
            required_fields: Optional mapping of resource type to fields that
                            must be present and non-empty on create.
        """
        self._documents: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._counters: Dict[str, int] = {}
        self._required_fields = {k: list(v) for k, v in (required_fields or {}).items()}
        self._failures: List[_InjectedFailure] = []
        self.calls: List[GatewayCall] = []

    # Test helpers

    def inject_failure(
        self,
        method: str,
        error: BaseException,
        resource_type: Optional[str] = None,
        identifier: Optional[str] = None,
        times: Optional[int] = 1
    ) -> None:
        """
        Make matching calls raise `error`.

        Args:
            method: Primitive name (create, update, delete, set_lifecycle_status,
                   validate_document)
            error: Exception to raise; need not be a DocumentGatewayError
            resource_type: Only match this resource type, if given
            identifier: Only match this identifier, if given
            times: Number of matching calls that fail; None fails forever
        """
        self._failures.append(_InjectedFailure(method, error, resource_type, identifier, times))

    def calls_to(self, method: str) -> List[GatewayCall]:
        return [call for call in self.calls if call.method == method]

    def get(self, resource_type: str, identifier: str) -> Optional[Dict[str, Any]]:
        document = self._documents.get(resource_type, {}).get(identifier)
        return copy.deepcopy(document) if document is not None else None

    def count(self, resource_type: str) -> int:
        return len(self._documents.get(resource_type, {}))

    def seed(
        self,
        resource_type: str,
        document: Mapping[str, Any],
        status: LifecycleStatus = LifecycleStatus.DRAFT
    ) -> Dict[str, Any]:
        """Store a document directly in the given state, bypassing the call log."""
        stored = self._store_new(resource_type, document)
        stored[DOCSTATUS_FIELD] = int(status)
        return copy.deepcopy(stored)

    # Primitives

    async def create(self, resource_type: str, document: Mapping[str, Any]) -> Dict[str, Any]:
        self._record("create", resource_type)
        missing = [
            field for field in self._required_fields.get(resource_type, [])
            if document.get(field) in (None, "")
        ]
        if missing:
            raise DocumentGatewayError(
                f"Mandatory fields required in {resource_type}: {', '.join(missing)}",
                ErrorKind.FIELD_ERROR,
                status_code=417
            )
        stored = self._store_new(resource_type, document)
        logger.debug(f"Created {resource_type}/{stored[IDENTIFIER_FIELD]}")
        return copy.deepcopy(stored)

    async def update(
        self,
        resource_type: str,
        identifier: str,
        patch: Mapping[str, Any]
    ) -> Dict[str, Any]:
        self._record("update", resource_type, identifier)
        document = self._require(resource_type, identifier)
        if document[DOCSTATUS_FIELD] != LifecycleStatus.DRAFT:
            raise DocumentGatewayError(
                f"Cannot edit {resource_type} {identifier} after it has been submitted or cancelled",
                ErrorKind.CONFLICT,
                status_code=409
            )
        document.update({k: copy.deepcopy(v) for k, v in patch.items()
                         if k not in (IDENTIFIER_FIELD, DOCSTATUS_FIELD)})
        return copy.deepcopy(document)

    async def delete(self, resource_type: str, identifier: str) -> None:
        self._record("delete", resource_type, identifier)
        document = self._require(resource_type, identifier)
        if document[DOCSTATUS_FIELD] == LifecycleStatus.SUBMITTED:
            raise DocumentGatewayError(
                f"Submitted {resource_type} {identifier} cannot be deleted; cancel it first",
                ErrorKind.CONFLICT,
                status_code=409
            )
        del self._documents[resource_type][identifier]
        logger.debug(f"Deleted {resource_type}/{identifier}")

    async def set_lifecycle_status(
        self,
        resource_type: str,
        identifier: str,
        target: LifecycleStatus
    ) -> Dict[str, Any]:
        self._record("set_lifecycle_status", resource_type, identifier)
        document = self._require(resource_type, identifier)
        current = LifecycleStatus(document[DOCSTATUS_FIELD])
        target = LifecycleStatus(target)

        if current == target:
            raise DocumentGatewayError(
                f"{resource_type} {identifier} is already {target.name.lower()}",
                ErrorKind.ALREADY_IN_STATE,
                status_code=409
            )
        allowed = {
            LifecycleStatus.SUBMITTED: LifecycleStatus.DRAFT,
            LifecycleStatus.CANCELLED: LifecycleStatus.SUBMITTED,
        }
        if allowed.get(target) != current:
            raise DocumentGatewayError(
                f"Cannot move {resource_type} {identifier} from "
                f"{current.name.lower()} to {target.name.lower()}",
                ErrorKind.CONFLICT,
                status_code=409
            )
        document[DOCSTATUS_FIELD] = int(target)
        return copy.deepcopy(document)

    async def validate_document(
        self,
        resource_type: str,
        document: Mapping[str, Any]
    ) -> Dict[str, Any]:
        self._record("validate_document", resource_type)
        errors = [
            {"field": field, "message": f"{field} is mandatory"}
            for field in self._required_fields.get(resource_type, [])
            if document.get(field) in (None, "")
        ]
        return {"valid": not errors, "errors": errors}

    # Internals

    def _record(self, method: str, resource_type: str, identifier: Optional[str] = None) -> None:
        call = GatewayCall(method, resource_type, identifier)
        self.calls.append(call)
        for failure in self._failures:
            if failure.matches(call):
                if failure.remaining is not None:
                    failure.remaining -= 1
                raise failure.error

    def _require(self, resource_type: str, identifier: str) -> Dict[str, Any]:
        document = self._documents.get(resource_type, {}).get(identifier)
        if document is None:
            raise DocumentGatewayError(
                f"{resource_type} {identifier} not found",
                ErrorKind.NOT_FOUND,
                status_code=404
            )
        return document

    def _store_new(self, resource_type: str, document: Mapping[str, Any]) -> Dict[str, Any]:
        identifier = document.get(IDENTIFIER_FIELD) or self._next_identifier(resource_type)
        collection = self._documents.setdefault(resource_type, {})
        if identifier in collection:
            raise DocumentGatewayError(
                f"{resource_type} {identifier} already exists",
                ErrorKind.CONFLICT,
                status_code=409
            )
        stored = copy.deepcopy(dict(document))
        stored[IDENTIFIER_FIELD] = identifier
        stored[DOCSTATUS_FIELD] = int(LifecycleStatus.DRAFT)
        collection[identifier] = stored
        return stored

    def _next_identifier(self, resource_type: str) -> str:
        self._counters[resource_type] = self._counters.get(resource_type, 0) + 1
        prefix = "".join(word[0] for word in resource_type.split()).upper()
        if len(prefix) < 2:
            prefix = resource_type[:4].upper()
        return f"{prefix}-{self._counters[resource_type]:05d}"
