"""Cache key management for effective permission sets."""

from dataclasses import dataclass
from urllib.parse import quote

from ....config.constants import CacheKeys, UNTYPED_SUBJECT_SEGMENT
from ....core.value_objects import RecordKey


def _encode(part: str) -> str:
    """Percent-encode a key part so opaque ids never clash with the separator."""
    return quote(str(part), safe="")


@dataclass(frozen=True)
class PermissionCacheKeys:
    """Builds cache and lock keys for a RecordKey."""

    prefix: str = "neo_authz"

    def _parts(self, key: RecordKey) -> dict:
        return {
            "prefix": self.prefix,
            "subject_type": _encode(key.subject_type) if key.subject_type is not None else UNTYPED_SUBJECT_SEGMENT,
            "subject_id": _encode(key.subject_id),
            "team_key": _encode(key.team_key),
        }

    def entry(self, key: RecordKey) -> str:
        """Key holding the cached permission set."""
        return CacheKeys.EFFECTIVE_PERMISSIONS.format(**self._parts(key))

    def lock(self, key: RecordKey) -> str:
        """Key of the recompute lock."""
        return CacheKeys.LOCK.format(**self._parts(key))

    def entry_pattern(self) -> str:
        """Glob matching every cached permission set under the prefix."""
        return CacheKeys.EFFECTIVE_PERMISSIONS_PATTERN.format(prefix=self.prefix)
