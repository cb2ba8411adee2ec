"""
Batch Validator

Validates a whole batch before any gateway call is made. An invalid batch is
rejected atomically with a single BatchValidationError naming the first
offending operation; a valid batch is returned as a list of typed operation
models ready for execution.

Typical usage from external projects:

    from bulk_operations import BatchValidator, BatchValidationError

    try:
        operations = BatchValidator.validate(raw_operations)
    except BatchValidationError as e:
        print(f"Rejected at index {e.index}: {e}")
"""

import logging
from typing import Any, List, Mapping, NoReturn, Optional, Sequence

from pydantic import ValidationError

from bulk_operations.bulk_ops_config import MAX_BATCH_OPERATIONS
from bulk_operations.bulk_ops_exceptions import BatchValidationError, ValidationReason
from bulk_operations.models.entities import (
    OPERATION_MODELS,
    OperationBase,
    OperationType
)

logger = logging.getLogger(__name__)

_VALID_TYPES = ", ".join(t.value for t in OperationType)


def _lookup(raw: Mapping[str, Any], *keys: str) -> Any:
    """Return the first non-None value among keys (field name, then aliases)."""
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _is_blank_text(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _is_blank_identifier(value: Any) -> bool:
    if isinstance(value, int) and not isinstance(value, bool):
        return False
    return _is_blank_text(value)


def _is_empty_mapping(value: Any) -> bool:
    return not isinstance(value, Mapping) or len(value) == 0


class BatchValidator:
    """
    Validates bulk operation batches.

    Rules are checked for the whole list first (non-empty, size limit), then
    per element in order: type tag, resource type, variant-specific fields.
    The first violation aborts validation.
    """

    @classmethod
    def validate(
        cls,
        operations: Any,
        max_operations: int = MAX_BATCH_OPERATIONS
    ) -> List[OperationBase]:
        """
        Validate a batch and convert every element to its operation model.

        Args:
            operations: Ordered sequence of operation models or raw mappings
                        (`type`, `resource_type`/`doctype`, `identifier`/`name`,
                        `document`/`doc`, `patch`).
            max_operations: Largest accepted batch size.

        Returns:
            The typed operations, in input order.

        Raises:
            BatchValidationError: On the first violation found.
        """
        if not cls._is_sequence(operations) or len(operations) == 0:
            cls._reject(
                "Batch is empty: operations must be a non-empty list",
                ValidationReason.BATCH_EMPTY
            )

        if len(operations) > max_operations:
            cls._reject(
                f"Too many operations: {len(operations)} given, "
                f"maximum {max_operations} allowed per batch",
                ValidationReason.TOO_MANY_OPERATIONS
            )

        return [cls.validate_operation(operation, index) for index, operation in enumerate(operations)]

    @classmethod
    def validate_operation(cls, operation: Any, index: int) -> OperationBase:
        """
        Validate a single batch element.

        Already-constructed operation models are structurally valid by
        construction and are returned unchanged.
        """
        if isinstance(operation, tuple(OPERATION_MODELS.values())):
            return operation

        if not isinstance(operation, Mapping):
            cls._reject(
                f"Invalid operation type at index {index}: expected an operation, "
                f"got {type(operation).__name__}",
                ValidationReason.INVALID_OPERATION_TYPE,
                index
            )

        raw_type = operation.get("type")
        op_type = cls._parse_type(raw_type)
        if op_type is None:
            cls._reject(
                f"Invalid operation type '{raw_type}' at index {index}. Valid types: {_VALID_TYPES}",
                ValidationReason.INVALID_OPERATION_TYPE,
                index
            )

        if _is_blank_text(_lookup(operation, "resource_type", "doctype")):
            cls._reject(
                f"Resource type required at index {index}",
                ValidationReason.RESOURCE_TYPE_REQUIRED,
                index
            )

        if op_type is not OperationType.CREATE and _is_blank_identifier(_lookup(operation, "identifier", "name")):
            cls._reject(
                f"Identifier is required for {op_type.value} operation at index {index}",
                ValidationReason.IDENTIFIER_REQUIRED,
                index
            )

        if op_type is OperationType.CREATE and _is_empty_mapping(_lookup(operation, "document", "doc")):
            cls._reject(
                f"Document data is required for create operation at index {index}",
                ValidationReason.DOCUMENT_REQUIRED,
                index
            )

        if op_type is OperationType.UPDATE and _is_empty_mapping(operation.get("patch")):
            cls._reject(
                f"Patch data is required for update operation at index {index}",
                ValidationReason.PATCH_REQUIRED,
                index
            )

        try:
            return OPERATION_MODELS[op_type].model_validate({**operation, "type": op_type.value})
        except ValidationError as e:
            first = e.errors()[0] if e.errors() else {"msg": str(e)}
            location = ".".join(str(part) for part in first.get("loc", ()))
            detail = f"{location}: {first['msg']}" if location else first["msg"]
            cls._reject(
                f"Invalid {op_type.value} operation at index {index}: {detail}",
                ValidationReason.INVALID_FIELD,
                index
            )

    @staticmethod
    def _is_sequence(value: Any) -> bool:
        return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))

    @staticmethod
    def _parse_type(raw_type: Any) -> Optional[OperationType]:
        if not isinstance(raw_type, str):
            return None
        try:
            return OperationType(raw_type)
        except ValueError:
            return None

    @staticmethod
    def _reject(message: str, reason: ValidationReason, index: Optional[int] = None) -> NoReturn:
        logger.warning(f"Batch validation failed ({reason.value}): {message}")
        raise BatchValidationError(message, reason, index)
