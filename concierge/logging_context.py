"""Session correlation for log records.

Each visitor conversation gets a session id that the orchestrator binds at
the start of every turn. ``SessionIdFilter`` copies it onto log records, and
``configure_logging`` installs a handler whose format shows it, so one
visitor's turns can be followed through routing, handlers and the gateway.

Usage:
    from concierge.logging_context import get_session_logger, set_session_id

    set_session_id(new_session_id())
    logger = get_session_logger(__name__)
    logger.info("Processing turn")  # record.session_id == "chat-1f3a9c0b"
"""

import logging
import uuid
from contextvars import ContextVar

NO_SESSION = "-"
LOG_FORMAT = "%(asctime)s [%(session_id)s] [%(name)s] %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_session_id: ContextVar[str] = ContextVar("session_id", default=NO_SESSION)


def new_session_id(prefix: str = "chat") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def set_session_id(session_id: str) -> None:
    """Bind the session id for the current async context."""
    _session_id.set(session_id)


def get_session_id() -> str:
    return _session_id.get()


class SessionIdFilter(logging.Filter):
    """Stamps the current session id onto every record it sees."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session_id"):
            record.session_id = _session_id.get()  # type: ignore[attr-defined]
        return True


def get_session_logger(name: str) -> logging.Logger:
    """Return a module logger that carries the session id on its own records."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, SessionIdFilter) for f in logger.filters):
        logger.addFilter(SessionIdFilter())
    return logger


def configure_logging(level: str = "INFO") -> None:
    """Install the root handler once. Records from any logger get a session id."""
    handler = logging.StreamHandler()
    handler.addFilter(SessionIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), handlers=[handler])
