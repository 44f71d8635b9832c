"""JSON facade over a storage area.

Reads never raise: a missing key, malformed JSON or an unreachable storage
area all yield the caller's default. Writes report failure as ``False`` so the
caller can keep its in-memory state and move on.
"""

from __future__ import annotations

import json
import logging
from typing import Any, TypeVar

from zervos.storage.area import StorageArea
from zervos.storage.errors import StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SCOPE_SEPARATOR = "::"


def scoped_key(base: str, workspace_id: str | None) -> str:
    """Return ``base`` suffixed with the workspace id, or ``base`` when unscoped."""
    if not workspace_id:
        return base
    return f"{base}{SCOPE_SEPARATOR}{workspace_id}"


class LocalStore:
    """Synchronous JSON read/write access for one browsing context.

    ``owner`` identifies the writer to the storage area so that the writer is
    excluded from the resulting ``storage`` notification.
    """

    def __init__(self, area: StorageArea, owner: Any = None):
        self.area = area
        self.owner = owner

    def read(self, key: str, default: T | None = None) -> Any:
        try:
            raw = self.area.get_item(key)
        except StorageError as e:
            logger.warning("Failed to access storage key '%s': %s", key, e)
            return default
        if raw is None:
            return default
        try:
            parsed = json.loads(raw)
        except ValueError as e:
            logger.warning("Failed to parse storage key '%s': %s", key, e)
            return default
        return default if parsed is None else parsed

    def read_list(self, key: str) -> list[Any]:
        """Read ``key`` as a JSON array; anything else is treated as empty."""
        value = self.read(key, [])
        if not isinstance(value, list):
            logger.warning("Storage key '%s' does not hold a list, ignoring it", key)
            return []
        return value

    def write(self, key: str, value: Any) -> bool:
        try:
            self.area.set_item(key, json.dumps(value), source=self.owner)
        except (StorageError, TypeError, ValueError) as e:
            logger.warning("Failed to save storage key '%s': %s", key, e)
            return False
        return True

    def remove(self, key: str) -> bool:
        try:
            self.area.remove_item(key, source=self.owner)
        except StorageError as e:
            logger.warning("Failed to remove storage key '%s': %s", key, e)
            return False
        return True

    def clear(self) -> bool:
        try:
            self.area.clear(source=self.owner)
        except StorageError as e:
            logger.warning("Failed to clear storage: %s", e)
            return False
        return True

    def keys(self, prefix: str | None = None) -> list[str]:
        try:
            keys = self.area.keys()
        except StorageError as e:
            logger.warning("Failed to list storage keys: %s", e)
            return []
        if prefix is None:
            return keys
        return [k for k in keys if k.startswith(prefix)]
