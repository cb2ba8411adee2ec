"""
Document Gateway Module

Provides access to the remote document store through four mutating
primitives keyed by (resource_type, identifier):
- create, update (partial patch), delete
- set_lifecycle_status (submit / cancel)
plus server-side validation for transaction previews.

Implementations:
- HttpDocumentGateway: REST resource API over httpx, with classified errors
  and tenacity-driven retries for requests that provably had no effect
- InMemoryDocumentGateway: process-local store for tests and examples
"""

from .base import DocumentGateway, LifecycleStatus, IDENTIFIER_FIELD, identifier_of
from .gateway_exceptions import (
    DocumentGatewayError,
    ErrorKind,
    classify_status,
    extract_error_message,
    is_retryable_status
)
from .http_gateway import HttpDocumentGateway
from .memory_gateway import InMemoryDocumentGateway, GatewayCall

__all__ = [
    'DocumentGateway',
    'LifecycleStatus',
    'IDENTIFIER_FIELD',
    'identifier_of',
    'DocumentGatewayError',
    'ErrorKind',
    'classify_status',
    'extract_error_message',
    'is_retryable_status',
    'HttpDocumentGateway',
    'InMemoryDocumentGateway',
    'GatewayCall'
]
