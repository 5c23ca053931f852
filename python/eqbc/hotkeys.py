"""Persisted hotkey macros.

Hotkeys are stored as a single pipe-joined string under ``HOTKEYS``.  The
pipe is reserved: values containing it (or a line break) are rejected on
edit.  Nothing is escaped.
"""

from __future__ import annotations

import logging
import threading
from typing import List, Sequence

from .store import KeyValueStore

logger = logging.getLogger(__name__)

HOTKEYS_KEY = "HOTKEYS"
DELIMITER = "|"
DEFAULT_HOTKEYS: Sequence[str] = ("/bcaa //sit", "/bcaa //stand", "/bcaa //follow")


class HotkeyError(ValueError):
    """Raised for hotkey values that cannot be stored."""


def validate_hotkey(value: str) -> str:
    if not isinstance(value, str):
        raise HotkeyError(f"hotkey must be a string, got {type(value).__name__}")
    if DELIMITER in value:
        raise HotkeyError(f"hotkey may not contain {DELIMITER!r}")
    if "\n" in value or "\r" in value:
        raise HotkeyError("hotkey may not contain line breaks")
    return value


class HotkeyStore:
    """Ordered, index-addressed hotkey slots backed by a key-value store."""

    def __init__(self, store: KeyValueStore, *, defaults: Sequence[str] = DEFAULT_HOTKEYS) -> None:
        if not defaults:
            raise ValueError("at least one default hotkey slot is required")
        self.store = store
        self.defaults = tuple(defaults)
        self._lock = threading.Lock()
        self._hotkeys: List[str] = list(self.defaults)

    def load(self) -> List[str]:
        raw = self.store.get(HOTKEYS_KEY)
        with self._lock:
            if raw is None:
                self._hotkeys = list(self.defaults)
            else:
                self._hotkeys = str(raw).split(DELIMITER)
            return list(self._hotkeys)

    @property
    def hotkeys(self) -> List[str]:
        with self._lock:
            return list(self._hotkeys)

    def __len__(self) -> int:
        with self._lock:
            return len(self._hotkeys)

    def get(self, index: int) -> str:
        with self._lock:
            self._check_index(index)
            return self._hotkeys[index]

    def set(self, index: int, value: str) -> None:
        validate_hotkey(value)
        with self._lock:
            self._check_index(index)
            self._hotkeys[index] = value

    def add(self, value: str) -> int:
        validate_hotkey(value)
        with self._lock:
            self._hotkeys.append(value)
            return len(self._hotkeys) - 1

    def persist(self) -> None:
        with self._lock:
            joined = DELIMITER.join(self._hotkeys)
        self.store.set(HOTKEYS_KEY, joined)
        logger.debug("persisted %d hotkeys", joined.count(DELIMITER) + 1)

    def reset(self) -> List[str]:
        with self._lock:
            self._hotkeys = list(self.defaults)
        self.persist()
        return self.hotkeys

    def _check_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int):
            raise IndexError(f"hotkey index must be an integer, got {index!r}")
        if not 0 <= index < len(self._hotkeys):
            raise IndexError(f"hotkey index {index} out of range (0..{len(self._hotkeys) - 1})")


__all__ = ["DEFAULT_HOTKEYS", "DELIMITER", "HOTKEYS_KEY", "HotkeyError", "HotkeyStore", "validate_hotkey"]
