"""Exceptions module for neo-authz.

Domain errors (catalog compilation, validation) and infrastructure errors
(cache, lock, storage) share the NeoAuthzError base.
"""

from .base import (
    NeoAuthzError,
    create_error_response,
)

from .domain import (
    ValidationError,
    CompileError,
    CyclicRoleReferenceError,
    UndefinedRoleReferenceError,
)

from .infrastructure import (
    CacheError,
    CacheConnectionError,
    CacheSerializationError,
    LockError,
    LockTimeoutError,
    StorageError,
)

__all__ = [
    # Base
    "NeoAuthzError",
    "create_error_response",

    # Domain
    "ValidationError",
    "CompileError",
    "CyclicRoleReferenceError",
    "UndefinedRoleReferenceError",

    # Infrastructure
    "CacheError",
    "CacheConnectionError",
    "CacheSerializationError",
    "LockError",
    "LockTimeoutError",
    "StorageError",
]
