"""Session event logging package."""

from billsplit.audit.logger import SessionLogger, configure_logging

__all__ = ["SessionLogger", "configure_logging"]
