"""Role services package."""

from .catalog import RoleCatalog

__all__ = ["RoleCatalog"]
