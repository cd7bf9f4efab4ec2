"""Neo-Authz - role composition and cached permission resolution.

Compiles a static role catalog at startup and resolves each subject's
effective permissions per team, caching the result behind a lock-guarded
recompute protocol shared across processes.
"""

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .__version__ import __version__

from .config import (
    NO_TEAM,
    AuthorizationSettings,
    CacheBackend,
)

from .core.exceptions import (
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

from .core.value_objects import RecordKey

from .features.roles import RoleCatalog, RoleDefinition, RoleBuilder, role
from .features.permissions import (
    Authorizable,
    AuthorizationRecord,
    AuthorizationStore,
    RolesAndPermissions,
    Subject,
    resolve_permissions,
    describe_record,
)
from .features.cache import (
    Cache,
    DistributedLock,
    CacheCoordinator,
    MemoryAdapter,
    MemoryLock,
    RedisAdapter,
    RedisLock,
)
from .features.stores import InMemoryAuthorizationStore, AsyncPGAuthorizationStore
from .features.authorization import AuthorizationService
from .module import create_authorization_service, create_cache_backend

__all__ = [
    "__version__",

    # Configuration
    "NO_TEAM",
    "AuthorizationSettings",
    "CacheBackend",

    # Exceptions
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

    # Value objects
    "RecordKey",

    # Roles
    "RoleCatalog",
    "RoleDefinition",
    "RoleBuilder",
    "role",

    # Permissions
    "Authorizable",
    "AuthorizationRecord",
    "AuthorizationStore",
    "RolesAndPermissions",
    "Subject",
    "resolve_permissions",
    "describe_record",

    # Cache
    "Cache",
    "DistributedLock",
    "CacheCoordinator",
    "MemoryAdapter",
    "MemoryLock",
    "RedisAdapter",
    "RedisLock",

    # Stores
    "InMemoryAuthorizationStore",
    "AsyncPGAuthorizationStore",

    # Facade
    "AuthorizationService",
    "create_authorization_service",
    "create_cache_backend",
]
