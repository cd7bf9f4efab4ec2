"""Core building blocks shared by every neo-authz feature."""

from .exceptions import (
    NeoAuthzError,
    ValidationError,
    CompileError,
    CyclicRoleReferenceError,
    UndefinedRoleReferenceError,
    CacheError,
    LockError,
    LockTimeoutError,
    StorageError,
    create_error_response,
)
from .value_objects import RecordKey, normalize_names

__all__ = [
    "NeoAuthzError",
    "ValidationError",
    "CompileError",
    "CyclicRoleReferenceError",
    "UndefinedRoleReferenceError",
    "CacheError",
    "LockError",
    "LockTimeoutError",
    "StorageError",
    "create_error_response",
    "RecordKey",
    "normalize_names",
]
