"""
Sensitive Data Redaction

Masks credentials before structures are written to logs. Only the top level
of a mapping is inspected; nested values are left as they are.
"""

from typing import Any, Dict, Mapping

REDACTED = "[REDACTED]"

SENSITIVE_FIELDS = frozenset({
    "api_key",
    "apikey",
    "api_secret",
    "apisecret",
    "password",
    "token",
    "authorization",
})


def redact_sensitive_data(data: Any) -> Any:
    """
    Return a copy of a mapping with sensitive values replaced.

    Keys are matched case-insensitively against SENSITIVE_FIELDS. Anything
    that is not a mapping is returned unchanged.

    Example:
        >>> redact_sensitive_data({"base_url": "https://erp", "api_key": "abc"})
        {'base_url': 'https://erp', 'api_key': '[REDACTED]'}
    """
    if not isinstance(data, Mapping):
        return data

    redacted: Dict[Any, Any] = dict(data)
    for key in redacted:
        if isinstance(key, str) and key.lower() in SENSITIVE_FIELDS:
            redacted[key] = REDACTED
    return redacted
