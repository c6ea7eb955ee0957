# sgfedit/common/config_store.py
"""JSON-based configuration store.

Implements the Mapping protocol so that ``dict(store)`` yields the raw config
dict, which :class:`~sgfedit.common.typed_config.TypedConfigReader` consumes.

Usage:
    from sgfedit.common.config_store import JsonFileConfigStore, load_config

    store = JsonFileConfigStore("sgfedit.json", indent=4)
    store.put("board", default_size=13)
    reader = load_config("sgfedit.json")
    reader.get_board().default_size  # 13
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from collections.abc import Iterator, Mapping
from datetime import datetime
from threading import Lock
from typing import Any

from sgfedit.common.typed_config import TypedConfigReader


def _get_logger() -> logging.Logger:
    """Get module logger (lazy to avoid side effect at import time)."""
    return logging.getLogger(__name__)


class JsonFileConfigStore(Mapping[str, dict[str, Any]]):
    """JSON file-based configuration store, one dict per section.

    Args:
        filename: Path to JSON file
        indent: JSON indentation (default 4)
    """

    def __init__(self, filename: str, indent: int = 4):
        self._filename = filename
        self._indent = indent
        self._lock = Lock()
        self._data: dict[str, dict[str, Any]] = {}
        self._load()

    def _load(self) -> None:
        if not os.path.exists(self._filename):
            self._data = {}
            return
        try:
            with open(self._filename, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            _get_logger().warning("Corrupt config file %s: %s", self._filename, e, exc_info=True)
            # Keep the corrupt file for manual recovery
            timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
            try:
                os.rename(self._filename, f"{self._filename}.corrupt.{timestamp}")
            except OSError as rename_error:
                _get_logger().warning("Could not preserve corrupt config file: %s", rename_error)
            self._data = {}
            return
        if not isinstance(data, dict):
            _get_logger().warning("Config file %s does not hold an object, ignoring it", self._filename)
            self._data = {}
            return
        for key, value in list(data.items()):
            if not isinstance(value, dict):
                _get_logger().warning("Config section %s is not a dict (got %s), removing", key, type(value).__name__)
                del data[key]
        self._data = data

    def _save(self) -> None:
        """Save data to the JSON file atomically (temp file + os.replace).

        Raises:
            OSError: If file operations fail.
            TypeError: If a value is not JSON serializable.
        """
        save_dir = os.path.dirname(self._filename) or "."
        os.makedirs(save_dir, exist_ok=True)

        fd = None
        temp_path = None
        try:
            fd, temp_path = tempfile.mkstemp(suffix=".tmp", dir=save_dir)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                fd = None  # os.fdopen took ownership
                json.dump(self._data, f, indent=self._indent, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, self._filename)
            temp_path = None
        finally:
            if fd is not None:
                os.close(fd)
            if temp_path is not None:
                with contextlib.suppress(OSError):
                    os.unlink(temp_path)

    def get(self, key: str) -> dict[str, Any] | None:  # type: ignore[override]
        """Returns a shallow copy of a section, or None if not found."""
        with self._lock:
            value = self._data.get(key)
            return dict(value) if value is not None else None

    def put(self, key: str, **kwargs: Any) -> None:
        """Stores a section, replacing any previous contents, and saves."""
        with self._lock:
            self._data[key] = kwargs
            self._save()

    def delete(self, key: str) -> bool:
        """Deletes a section. Returns False if it did not exist."""
        with self._lock:
            if key in self._data:
                del self._data[key]
                self._save()
                return True
            return False

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        with self._lock:
            return key in self._data

    def __getitem__(self, key: str) -> dict[str, Any]:
        with self._lock:
            return dict(self._data[key])

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._data.keys()))

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __repr__(self) -> str:
        return f"JsonFileConfigStore({self._filename!r})"


def load_config(path: str) -> TypedConfigReader:
    """Reads a JSON config file into a typed reader. A missing file gives all defaults."""
    store = JsonFileConfigStore(path)
    return TypedConfigReader(dict(store))
