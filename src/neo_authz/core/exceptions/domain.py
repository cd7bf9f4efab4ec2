"""Domain-specific exceptions for neo-authz.

Errors raised while compiling the role catalog or validating caller input.
"""

from typing import Sequence

from .base import NeoAuthzError


class ValidationError(NeoAuthzError):
    """Raised when input validation fails."""
    pass


# Role catalog compilation errors
class CompileError(NeoAuthzError):
    """Base class for role catalog compilation errors.

    A catalog that fails to compile must abort startup.
    """
    pass


class CyclicRoleReferenceError(CompileError):
    """Raised when a role transitively bases itself on itself."""

    def __init__(self, role_name: str, cycle_path: Sequence[str]):
        self.role_name = role_name
        self.cycle_path = tuple(cycle_path)
        super().__init__(
            f"Cyclic role reference for '{role_name}': {' -> '.join(self.cycle_path)}",
            details={"role": role_name, "cycle_path": list(self.cycle_path)},
        )


class UndefinedRoleReferenceError(CompileError):
    """Raised when a role is based on a role that is never defined."""

    def __init__(self, role_name: str, missing: Sequence[str]):
        self.role_name = role_name
        self.missing = tuple(missing)
        super().__init__(
            f"Role '{role_name}' is based on undefined role(s): {', '.join(self.missing)}",
            details={"role": role_name, "missing": list(self.missing)},
        )
