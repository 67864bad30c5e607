"""Thread-safe mapping from call id to pending call state."""

from __future__ import annotations

import threading

from callaudit.recording.models import PendingCall


class CorrelationStore:
    """Pending calls keyed by call id.

    Every operation holds one lock, so concurrent callers (worker threads
    or overlapping coroutines) see a consistent store: of two inserts for
    the same id exactly one wins, and a removed id never comes back.

    There is no eviction. Calls whose response never arrives stay here
    until the process exits.
    """

    def __init__(self) -> None:
        self._pending: dict[str, PendingCall] = {}
        self._lock = threading.Lock()

    def insert(self, call_id: str, record: PendingCall) -> bool:
        """Store a pending call unless the id is already present.

        Returns:
            True if the record was stored, False if the id was taken.
        """
        with self._lock:
            if call_id in self._pending:
                return False
            self._pending[call_id] = record
            return True

    def get(self, call_id: str) -> PendingCall | None:
        with self._lock:
            return self._pending.get(call_id)

    def remove(self, call_id: str) -> None:
        with self._lock:
            self._pending.pop(call_id, None)

    def take(self, call_id: str) -> PendingCall | None:
        """Atomically look up and remove a pending call."""
        with self._lock:
            return self._pending.pop(call_id, None)

    def pending_ids(self) -> list[str]:
        with self._lock:
            return list(self._pending)

    def __contains__(self, call_id: object) -> bool:
        with self._lock:
            return call_id in self._pending

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)
