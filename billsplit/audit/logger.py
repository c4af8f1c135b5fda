"""
Session Event Logger

DESIGN DECISION: Every mutation of a split session is logged.
This provides:
1. Traceability of how each amount came about
2. Debugging capability when a share looks wrong
3. A visible record of rejected input

The session logger:
- Is synchronous, like the session it serves
- Gracefully handles failures (doesn't break the session if logging fails)
- Tags every event with the session id
"""

import logging
import sys
from typing import Optional

import structlog

from billsplit.config import LOG_LEVELS, get_settings
from billsplit.models.events import SessionEvent, SessionEventSeverity


def configure_logging(level: Optional[str] = None, json: Optional[bool] = None) -> None:
    """
    Configure structlog for session event logging.

    Falls back to the configured `log_level` / `log_json` settings.
    Safe to call more than once; the last call wins.
    Raises ValueError for a level name logging does not know.
    """
    settings = get_settings()
    level = (level or settings.log_level).strip().upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"Unsupported log level: {level}. Allowed: {list(LOG_LEVELS)}")
    json = settings.log_json if json is None else json

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level),
    )
    logging.getLogger("billsplit").setLevel(getattr(logging, level))

    renderer = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class SessionLogger:
    """
    Central session event logging service.

    Logs events to the structured local log and keeps the events of the
    current session in memory, so a caller can show the history.
    """

    def __init__(self, keep_history: bool = True):
        # Unconfigured structlog prints every level to stdout
        if not structlog.is_configured():
            configure_logging()
        self._logger = structlog.get_logger("billsplit.session")
        self._keep_history = keep_history
        self._history: list[SessionEvent] = []

    @property
    def history(self) -> list[SessionEvent]:
        return list(self._history)

    def log(self, event: SessionEvent) -> bool:
        """
        Log a session event.

        Returns False if the log write failed. Never raises.
        """
        if self._keep_history:
            self._history.append(event)

        log_dict = event.to_log_dict()
        try:
            if event.severity == SessionEventSeverity.ERROR:
                self._logger.error("session_event", **log_dict)
            elif event.severity == SessionEventSeverity.WARNING:
                self._logger.warning("session_event", **log_dict)
            elif event.severity == SessionEventSeverity.DEBUG:
                self._logger.debug("session_event", **log_dict)
            else:
                self._logger.info("session_event", **log_dict)
        except Exception as e:
            # Logging must not take the session down with it
            sys.stderr.write(f"session event logging failed: {e}\n")
            return False
        return True
