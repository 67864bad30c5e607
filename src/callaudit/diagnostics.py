"""Non-fatal diagnostic channel for audit failures.

Audit problems (unwritable log directory, unexpected payload shapes) are
printed to stderr and otherwise ignored, so the host's request/response
flow never sees them.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

console = Console(stderr=True)


def report_error(context: str, exc: BaseException | None = None) -> None:
    """Print a one-line warning describing an audit failure.

    Args:
        context: Short description of what was being attempted.
        exc: The exception that was caught, if any.
    """
    message = f"[yellow]callaudit: {escape(context)}"
    if exc is not None:
        message += f": {escape(type(exc).__name__)}: {escape(str(exc))}"
    message += "[/yellow]"
    try:
        console.print(message, highlight=False)
    except Exception:  # noqa: BLE001
        # stderr itself is unusable; nothing left to report to
        pass
