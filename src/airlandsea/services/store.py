from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import ContextManager, Generic, Iterator, Protocol, TypeVar

T = TypeVar("T")


class KeyedStore(Protocol[T]):
    """Load/store by key, with `locked(key)` serializing work on one key.

    Callers must hold `locked(key)` across a load-mutate-store sequence.
    Work on different keys must not block each other.
    """

    def load(self, key: str) -> T | None: ...

    def store(self, key: str, value: T) -> None: ...

    def contains(self, key: str) -> bool: ...

    def locked(self, key: str) -> ContextManager[None]: ...


@dataclass
class _KeyLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class InMemoryStore(Generic[T]):
    """Process-local store; contents are lost when the process exits."""

    def __init__(self) -> None:
        self._items: dict[str, T] = {}
        self._locks: dict[str, _KeyLock] = {}
        self._locks_guard = threading.Lock()

    def load(self, key: str) -> T | None:
        return self._items.get(key)

    def store(self, key: str, value: T) -> None:
        self._items[key] = value

    def contains(self, key: str) -> bool:
        return key in self._items

    def keys(self) -> list[str]:
        return list(self._items.keys())

    def lock_count(self) -> int:
        with self._locks_guard:
            return len(self._locks)

    @contextmanager
    def locked(self, key: str) -> Iterator[None]:
        with self._locks_guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _KeyLock()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._locks_guard:
                entry.users -= 1
                # keys that were never stored keep no lock behind
                if entry.users == 0 and key not in self._items:
                    del self._locks[key]
