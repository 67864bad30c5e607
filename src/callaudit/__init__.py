"""callaudit: request/response audit logging for completion API calls."""

__version__ = "0.1.0"
