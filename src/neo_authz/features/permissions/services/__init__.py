"""Permission services package."""

from .resolver import resolve_permissions, describe_record

__all__ = ["resolve_permissions", "describe_record"]
