"""Authorization feature for neo-authz.

The public facade combining the role catalog, the record store and the
permission cache coordinator.
"""

from .services import AuthorizationService

__all__ = ["AuthorizationService"]
