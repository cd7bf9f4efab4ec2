"""Value objects for neo-authz."""

from .identifiers import RecordKey, normalize_names, flatten_names

__all__ = [
    "RecordKey",
    "normalize_names",
    "flatten_names",
]
