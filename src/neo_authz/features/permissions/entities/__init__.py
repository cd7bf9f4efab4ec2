"""Permission entities package.

Authorization records, the permission breakdown and the subject/store protocols.
"""

from .record import AuthorizationRecord
from .breakdown import RolesAndPermissions
from .protocols import Authorizable, Subject, AuthorizationStore

__all__ = [
    # Domain entities
    "AuthorizationRecord",
    "RolesAndPermissions",
    "Subject",

    # Protocols
    "Authorizable",
    "AuthorizationStore",
]
