"""
Bulk Operations Configuration

Centralized configuration for the bulk transaction executor, providing a
single source of truth for batch limits, the default failure-handling mode
and per-call timeouts.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional
import logging

from config import BulkSettings

logger = logging.getLogger(__name__)

# Hard upper bound on operations per batch; configuration may only lower it
MAX_BATCH_OPERATIONS = 100


@dataclass
class BulkOperationConfig:
    """
    Configuration for bulk operations.

    Attributes:
        max_operations: Maximum number of operations accepted in one batch
                        (1..100).
        rollback_on_failure: Mode used when the caller does not choose one.
                             True means stop at the first failure and delete
                             every document created earlier in the batch.
        operation_timeout: Timeout in seconds applied to each gateway call,
                           including compensating deletes. None means the
                           gateway's own timeout is the only limit.
        enable_timing: Whether BulkManager records timing for each run.

    Example:
        ```python
        config = BulkOperationConfig(rollback_on_failure=False, operation_timeout=15.0)
        manager = BulkManager(gateway, config=config)
        ```
    """

    max_operations: int = MAX_BATCH_OPERATIONS
    rollback_on_failure: bool = True
    operation_timeout: Optional[float] = None
    enable_timing: bool = True

    def __post_init__(self):
        """Validate configuration parameters after initialization."""
        if not 1 <= self.max_operations <= MAX_BATCH_OPERATIONS:
            raise ValueError(
                f"max_operations must be between 1 and {MAX_BATCH_OPERATIONS}, "
                f"got {self.max_operations}"
            )

        if self.operation_timeout is not None and self.operation_timeout <= 0:
            raise ValueError("operation_timeout must be positive or None")

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'BulkOperationConfig':
        """
        Create configuration from a dictionary.

        Unknown keys are ignored so that a whole settings section (from YAML,
        JSON or environment variables) can be passed in.
        """
        valid_fields = {f.name for f in fields(cls)}
        filtered_dict = {k: v for k, v in config_dict.items() if k in valid_fields}
        ignored = set(config_dict) - valid_fields
        if ignored:
            logger.debug(f"Ignoring unknown bulk configuration keys: {sorted(ignored)}")

        return cls(**filtered_dict)

    @classmethod
    def from_settings(cls, settings: BulkSettings) -> 'BulkOperationConfig':
        """Build configuration from the bulk section of ErpSettings."""
        return cls.from_dict(settings.model_dump())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'max_operations': self.max_operations,
            'rollback_on_failure': self.rollback_on_failure,
            'operation_timeout': self.operation_timeout,
            'enable_timing': self.enable_timing
        }
