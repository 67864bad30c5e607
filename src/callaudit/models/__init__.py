"""Configuration models for callaudit."""

from callaudit.models.config import AuditConfig, ConfigError, load_audit_config

__all__ = ["AuditConfig", "ConfigError", "load_audit_config"]
