"""
Process-wide session defaults.

The SessionStore remembers the last values an agent set for the recognized
parameter keys (project, scheme, simulator, ...) so later tool calls can
omit them.

Invariants:
    - For every pair in SESSION_EXCLUSIVE_PAIRS, at most one side is
      populated at any time. Setting one side clears the other in the
      same update.
    - None values in an update mean "not provided": they neither store
      anything nor clear a paired key.
    - Every operation holds the lock for its whole duration, so a reader
      sees either the state before a concurrent update or the state after.

The store does not validate key names; the schema layer in front of the
session tools rejects unknown keys.
"""

import threading
from typing import Any, Iterable, Mapping

SESSION_KEYS: tuple[str, ...] = (
    "projectPath",
    "workspacePath",
    "scheme",
    "configuration",
    "simulatorName",
    "simulatorId",
    "deviceId",
    "useLatestOS",
    "arch",
)

SESSION_EXCLUSIVE_PAIRS: tuple[tuple[str, str], ...] = (
    ("projectPath", "workspacePath"),
    ("simulatorId", "simulatorName"),
)


def _counterparts(pairs: Iterable[tuple[str, str]]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for first, second in pairs:
        mapping[first] = second
        mapping[second] = first
    return mapping


class SessionStore:
    """
    Thread-safe key/value store for session defaults.

    Usage:
        store = SessionStore()
        store.set_defaults({"scheme": "App", "projectPath": "/p.xcodeproj"})
        store.set_defaults({"workspacePath": "/w.xcworkspace"})  # drops projectPath
        store.get_all()  # {"scheme": "App", "workspacePath": "/w.xcworkspace"}

    Attributes:
        exclusive_pairs: Key pairs that may never both be populated
    """

    def __init__(
        self,
        exclusive_pairs: Iterable[tuple[str, str]] = SESSION_EXCLUSIVE_PAIRS,
    ) -> None:
        self.exclusive_pairs = tuple(exclusive_pairs)
        self._counterpart = _counterparts(self.exclusive_pairs)
        self._values: dict[str, Any] = {}
        self._lock = threading.Lock()

    def set_defaults(self, partial: Mapping[str, Any]) -> dict[str, Any]:
        """
        Merge a partial update into the stored defaults.

        For each provided key that belongs to an exclusive pair, the paired
        key is removed before the key is written. If an update names both
        sides of a pair, the one that comes later wins.

        Args:
            partial: Keys to set; None values are ignored

        Returns:
            Snapshot of the defaults after the update
        """
        with self._lock:
            for key, value in partial.items():
                if value is None:
                    continue
                paired = self._counterpart.get(key)
                if paired is not None:
                    self._values.pop(paired, None)
                self._values[key] = value
            return dict(self._values)

    def get_all(self) -> dict[str, Any]:
        """Return a shallow copy of the current defaults."""
        with self._lock:
            return dict(self._values)

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._values.get(key, default)

    def clear(self, keys: Iterable[str] | None = None) -> None:
        """
        Remove the named keys, or everything when keys is None.

        Clearing a key that isn't set is a no-op.
        """
        with self._lock:
            if keys is None:
                self._values.clear()
                return
            for key in keys:
                self._values.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._values

    def __repr__(self) -> str:
        return f"<SessionStore: {sorted(self.get_all())}>"
