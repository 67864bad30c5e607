"""callaudit status -- show the effective audit configuration.

Prints whether logging is on, where logs go, which redaction extras are
active, and how to switch logging on or off.
"""

from __future__ import annotations

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from callaudit.models.config import (
    ENABLE_ENV_VAR,
    LOG_DIR_ENV_VAR,
    ConfigError,
    find_project_root,
    load_audit_config,
)


def status() -> None:
    """Show whether API logging is enabled and where logs are written."""
    console = Console()

    try:
        config = load_audit_config()
    except ConfigError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    project_root = find_project_root()

    table = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    table.add_column("Key", style="bold")
    table.add_column("Value")

    enabled = "[green]enabled[/green]" if config.enabled else "[dim]disabled[/dim]"
    table.add_row("Logging", enabled)
    table.add_row("Log directory", str(config.log_dir))
    table.add_row(
        "Config file",
        str(project_root / "callaudit.yaml") if project_root else "-",
    )
    table.add_row(
        "Extra secret keys",
        ", ".join(config.extra_secret_keys) or "-",
    )
    if config.scrub_patterns is None:
        scrub = "off"
    else:
        scrub = f"on ({len(config.scrub_patterns)} custom patterns)"
    table.add_row("String scrubbing", scrub)

    console.print(table)

    if config.enabled:
        console.print(f"To disable logging:  [bold]unset {ENABLE_ENV_VAR}[/bold]")
    else:
        console.print(
            f"To enable logging:   [bold]export {ENABLE_ENV_VAR}=true[/bold]"
        )
    console.print(
        f"[dim]Set {LOG_DIR_ENV_VAR} to write logs to another directory.[/dim]"
    )
