"""
Utilities Module

Common helpers shared across the package:
- Logging configuration from settings
- Redaction of credentials before structures are logged
"""

from .logging_setup import configure_logging
from .redaction import redact_sensitive_data, REDACTED, SENSITIVE_FIELDS

__all__ = [
    'configure_logging',
    'redact_sensitive_data',
    'REDACTED',
    'SENSITIVE_FIELDS',
]
