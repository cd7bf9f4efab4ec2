"""Stores feature for neo-authz.

Persistence of authorization records behind the AuthorizationStore protocol:
- repositories/: In-memory and AsyncPG implementations
"""

from .repositories import InMemoryAuthorizationStore, AsyncPGAuthorizationStore

__all__ = [
    "InMemoryAuthorizationStore",
    "AsyncPGAuthorizationStore",
]
