"""Composition of one audit session: config, log writer and recorder.

The host builds exactly one AuditSession at its top level and passes the
recorder to whatever performs API calls. Nothing here is a module-level
global, so tests can build as many isolated sessions as they need.
"""

from __future__ import annotations

from dataclasses import dataclass

from callaudit.models.config import AuditConfig, load_audit_config
from callaudit.recording.recorder import CallRecorder
from callaudit.recording.redaction import build_scrubber
from callaudit.storage.session import Session, SessionWriter


@dataclass
class AuditSession:
    """Everything that lives for one process's audit log."""

    config: AuditConfig
    session: Session
    writer: SessionWriter
    recorder: CallRecorder

    def close(self) -> None:
        """Flush queued entries and stop the writer thread."""
        self.writer.close()

    def __enter__(self) -> "AuditSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def open_audit_session(config: AuditConfig | None = None) -> AuditSession:
    """Build an AuditSession from config (loaded from the environment if None).

    Raises:
        ConfigError: If no config is given and callaudit.yaml is invalid.
        ValueError: If a configured scrub pattern does not compile.
    """
    if config is None:
        config = load_audit_config()

    scrub = None
    if config.scrub_patterns is not None:
        scrub = build_scrubber(config.scrub_patterns)

    session = Session.start(config.log_dir)
    writer = SessionWriter(session, enabled=config.enabled)
    recorder = CallRecorder(
        writer,
        extra_secret_keys=config.extra_secret_keys,
        scrub=scrub,
    )
    return AuditSession(
        config=config, session=session, writer=writer, recorder=recorder
    )
