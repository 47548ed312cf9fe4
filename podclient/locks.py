"""Per-host locking."""

from contextlib import contextmanager
from threading import Lock, RLock
from typing import Dict, Generator


class _HostEntry(object):
    """Lock state shared by the callers currently interested in a host."""

    def __init__(self) -> None:
        self.lock = RLock()
        self.users = 0
        self.completed = 0


class Turn(object):
    """One caller's hold on a host lock."""

    def __init__(self, entry: _HostEntry, seen: int) -> None:
        self._entry = entry
        self._seen = seen

    @property
    def superseded(self) -> bool:
        """Whether another caller completed its work while this one waited."""
        return self._entry.completed != self._seen

    def complete(self) -> None:
        """Mark the work done, for callers still waiting on this host."""
        self._entry.completed += 1


class HostLocks(object):
    """
    Hands out one re-entrant lock per host.

    A host's lock lives only as long as some caller holds or waits on it.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, _HostEntry] = {}
        self._guard = Lock()

    @contextmanager
    def hold(self, host: str) -> Generator[Turn, None, None]:
        """Hold the lock for ``host`` for the duration of the block."""
        with self._guard:
            entry = self._entries.get(host)
            if entry is None:
                entry = self._entries[host] = _HostEntry()
            entry.users += 1
            seen = entry.completed
        try:
            with entry.lock:
                yield Turn(entry, seen)
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._entries[host]

    def waiting(self, host: str) -> int:
        """Count the callers holding or waiting on ``host``."""
        with self._guard:
            entry = self._entries.get(host)
            return entry.users if entry is not None else 0
