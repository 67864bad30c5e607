"""Per-process audit session and its append-only log file.

File layout:
    <log_dir>/
        api-session-YYYY-MM-DD--HH-MM-SS-ffffff.log

Writes are handed to a single background worker so callers never wait
on disk I/O; the worker keeps them in submission order. A failed write
is reported to stderr and dropped, and the next write tries again.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from callaudit.diagnostics import report_error

SESSION_HEADER = "API REQUEST/RESPONSE LOG - SESSION: {session_id}\n\n"


def make_session_id(started_at: datetime | None = None) -> str:
    """Derive a session id from the session start time."""
    started_at = started_at or datetime.now()
    return f"session-{started_at:%Y-%m-%d--%H-%M-%S-%f}"


@dataclass(frozen=True)
class Session:
    """One audit destination: a session id and the file it appends to."""

    session_id: str
    log_file: Path

    @classmethod
    def start(cls, log_dir: Path, started_at: datetime | None = None) -> "Session":
        session_id = make_session_id(started_at)
        return cls(session_id=session_id, log_file=log_dir / f"api-{session_id}.log")


class SessionWriter:
    """Append formatted entries to a session's log file.

    Inert when ``enabled`` is False: nothing is queued, no directory is
    created. The log directory and the session header are created on the
    first write that succeeds.
    """

    def __init__(self, session: Session, enabled: bool) -> None:
        self.session = session
        self.enabled = enabled
        self._initialized = False
        self._executor: ThreadPoolExecutor | None = None
        if enabled:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="callaudit-writer"
            )

    def append(self, text: str) -> None:
        """Queue text for appending and return immediately."""
        executor = self._executor
        if executor is None:
            return
        try:
            executor.submit(self._write, text)
        except RuntimeError as exc:
            # Executor already shut down
            report_error("log writer is closed, entry dropped", exc)

    def _ensure_initialized(self) -> None:
        if self._initialized:
            return
        log_file = self.session.log_file
        log_file.parent.mkdir(parents=True, exist_ok=True)
        with log_file.open("a", encoding="utf-8") as fh:
            fh.write(SESSION_HEADER.format(session_id=self.session.session_id))
        self._initialized = True

    def _write(self, text: str) -> None:
        try:
            self._ensure_initialized()
            with self.session.log_file.open("a", encoding="utf-8") as fh:
                fh.write(text)
        except Exception as exc:  # noqa: BLE001
            report_error(f"cannot write to {self.session.log_file}", exc)

    def flush(self, timeout: float | None = None) -> None:
        """Block until every entry queued so far has been written."""
        if self._executor is None:
            return
        try:
            self._executor.submit(lambda: None).result(timeout=timeout)
        except Exception as exc:  # noqa: BLE001
            report_error("flushing the log writer failed", exc)

    def close(self) -> None:
        """Write out queued entries and stop the worker."""
        if self._executor is None:
            return
        self._executor.shutdown(wait=True)
        self._executor = None
