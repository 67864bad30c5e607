"""Audit configuration for callaudit.

Defaults come from callaudit.yaml (if one is found above the working
directory); the LOG_API_RAW and CALLAUDIT_LOG_DIR environment variables
override it. The config is read once, when the session is built.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

CONFIG_FILENAME = "callaudit.yaml"
ENABLE_ENV_VAR = "LOG_API_RAW"
LOG_DIR_ENV_VAR = "CALLAUDIT_LOG_DIR"


def default_log_dir() -> Path:
    return Path.home() / ".codex" / "api-logs"


class ConfigError(Exception):
    """Raised when callaudit.yaml cannot be read or is invalid."""


class AuditConfig(BaseModel):
    """Effective audit settings for one process."""

    model_config = {"extra": "forbid"}

    enabled: bool = False
    log_dir: Path = Field(default_factory=default_log_dir)
    extra_secret_keys: list[str] = Field(default_factory=list)
    scrub_patterns: list[str] | None = None

    @field_validator("log_dir", mode="after")
    @classmethod
    def _expand_user(cls, value: Path) -> Path:
        return value.expanduser()


def find_project_root(start: Path | None = None) -> Path | None:
    """Walk up from start (default: cwd) looking for callaudit.yaml.

    Returns:
        The directory containing callaudit.yaml, or None if there is none.
    """
    current = (start or Path.cwd()).resolve()
    if current.is_file():
        current = current.parent
    while True:
        if (current / CONFIG_FILENAME).exists():
            return current
        if current == current.parent:
            return None
        current = current.parent


def _env_flag(value: str | None) -> bool:
    return value is not None and value.strip().lower() == "true"


def load_audit_config(
    project_root: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> AuditConfig:
    """Build the effective AuditConfig from callaudit.yaml and the environment.

    Args:
        project_root: Directory holding callaudit.yaml. If None,
            find_project_root() is used to locate it.
        environ: Environment mapping; defaults to os.environ.

    Returns:
        Validated AuditConfig.

    Raises:
        ConfigError: If callaudit.yaml is malformed or has invalid fields.
    """
    env = os.environ if environ is None else environ
    if project_root is None:
        project_root = find_project_root()

    raw: dict = {}
    if project_root is not None:
        config_path = project_root / CONFIG_FILENAME
        if config_path.exists():
            import yaml

            try:
                loaded = yaml.safe_load(config_path.read_text(encoding="utf-8"))
            except (OSError, yaml.YAMLError) as exc:
                raise ConfigError(f"Cannot read {config_path}: {exc}") from exc
            if loaded is not None and not isinstance(loaded, dict):
                raise ConfigError(
                    f"{config_path} must contain a mapping, got {type(loaded).__name__}"
                )
            raw = dict(loaded or {})

    if ENABLE_ENV_VAR in env:
        raw["enabled"] = _env_flag(env[ENABLE_ENV_VAR])
    if env.get(LOG_DIR_ENV_VAR):
        raw["log_dir"] = env[LOG_DIR_ENV_VAR]

    try:
        return AuditConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid callaudit configuration:\n{exc}") from exc
