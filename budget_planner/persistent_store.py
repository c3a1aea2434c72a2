"""Key-value persistence for the budget planner.

Each key is stored as its own JSON document under the storage directory,
so ``expenses`` and ``budgets`` can be read, written and corrupted
independently of one another. Reads fall back to the supplied default
when the document is missing or unreadable; writes never raise.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Optional

from . import config

logger = logging.getLogger(__name__)


def ensure_directory(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary.

    Args:
        path: The directory path to ensure exists

    Returns:
        The path object (for chaining)
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


class LocalStorage:
    """File-backed key-value store holding one JSON blob per key."""

    def __init__(self, storage_dir: Optional[Path] = None):
        """Initialize local storage.

        Args:
            storage_dir: Optional custom directory for blobs.
                        Defaults to STORAGE_DIR from config.
        """
        self.storage_dir = Path(storage_dir) if storage_dir else config.STORAGE_DIR

    def get_path(self, key: str) -> Path:
        return self.storage_dir / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        """Return the raw text stored under ``key`` or ``None`` if absent."""
        target = self.get_path(key)
        if not target.exists():
            return None
        with target.open('r', encoding='utf-8') as handle:
            return handle.read()

    def set_item(self, key: str, value: str) -> None:
        target = self.get_path(key)
        ensure_directory(target.parent)
        tmp = target.with_suffix('.json.tmp')
        try:
            with tmp.open('w', encoding='utf-8') as handle:
                handle.write(value)
            tmp.replace(target)
        except OSError:
            if tmp.exists():
                tmp.unlink()
            raise

    def load(self, key: str, default: Any) -> Any:
        """Load and decode the blob stored under ``key``.

        Args:
            key: Storage key
            default: Value returned when the blob is missing or corrupt

        Returns:
            The decoded JSON value, or a copy of ``default``

        Note:
            Read and decode failures are logged and treated as absence.
        """
        try:
            raw = self.get_item(key)
        except UnicodeDecodeError as e:
            logger.warning("Discarding undecodable '%s' blob: %s", key, e)
            return copy.deepcopy(default)
        except OSError as e:
            logger.error("Could not read '%s' from %s: %s", key, self.storage_dir, e)
            return copy.deepcopy(default)
        if raw is None:
            return copy.deepcopy(default)
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Discarding corrupt '%s' blob: %s", key, e)
            return copy.deepcopy(default)

    def save(self, key: str, value: Any) -> bool:
        """Encode ``value`` as JSON and store it under ``key``.

        Returns:
            True when the write succeeded, False otherwise. Failures are
            logged and never propagated.
        """
        try:
            payload = json.dumps(value, indent=2, sort_keys=True)
        except (TypeError, ValueError) as e:
            logger.error("Could not serialize '%s': %s", key, e)
            return False
        try:
            self.set_item(key, payload)
        except OSError as e:
            logger.error("Could not write '%s' to %s: %s", key, self.storage_dir, e)
            return False
        return True
