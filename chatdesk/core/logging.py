"""Logging setup for chatdesk.

Log records emitted while a gateway operation runs carry that operation's
request id, rendered as a short `[abcd1234]` prefix by `CorrelationFormatter`.
"""

import hashlib
import logging
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

NOISY_HTTP_LOGGERS = (
    "httpx",
    "httpcore",
    "httpcore.http11",
    "httpcore.connection",
)

_correlation_id: ContextVar[str | None] = ContextVar("chatdesk_correlation_id", default=None)

logger = logging.getLogger(__name__)


def normalize_log_level(level: str | None) -> str:
    """Return a valid upper-case level name, falling back to INFO."""
    # Extract just the first word to tolerate trailing comments in .env files
    parts = (level or "").split()
    candidate = parts[0].upper() if parts else ""
    return candidate if candidate in VALID_LOG_LEVELS else "INFO"


def set_noisy_http_logger_levels(current_log_level: str) -> None:
    """Ensure HTTP client noise only surfaces at DEBUG level."""

    noisy_level = logging.DEBUG if current_log_level == "DEBUG" else logging.WARNING
    for logger_name in NOISY_HTTP_LOGGERS:
        logging.getLogger(logger_name).setLevel(noisy_level)


def api_key_fingerprint(api_key: str | None) -> str:
    """Return a loggable fingerprint of an API key."""
    if not api_key:
        return "<not-set>"
    return "sha256:" + hashlib.sha256(api_key.encode()).hexdigest()[:16] + "..."


@contextmanager
def correlation_context(request_id: str) -> Generator[None, None, None]:
    """Tag every log record emitted inside the block with `request_id`."""
    token = _correlation_id.set(request_id)
    try:
        yield
    finally:
        _correlation_id.reset(token)


def current_correlation_id() -> str | None:
    return _correlation_id.get()


class CorrelationIdFilter(logging.Filter):
    """Copy the active correlation id onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        request_id = _correlation_id.get()
        if request_id is not None and not hasattr(record, "correlation_id"):
            record.correlation_id = request_id
        return True


class CorrelationFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "correlation_id"):
            return super().format(record)
        # Other handlers share the record, so prefix a copy
        tagged = logging.makeLogRecord(record.__dict__)
        tagged.msg = f"[{record.correlation_id[:8]}] {record.msg}"
        return super().format(tagged)


class HttpRequestLogDowngradeFilter(logging.Filter):
    """Downgrade noisy third-party HTTP logs to DEBUG."""

    def __init__(self, *prefixes: str) -> None:
        super().__init__()
        self.prefixes = prefixes

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno == logging.INFO:
            for prefix in self.prefixes:
                if record.name.startswith(prefix):
                    record.levelno = logging.DEBUG
                    record.levelname = logging.getLevelName(logging.DEBUG)
                    break
        return True


def configure_root_logging(log_level: str | None = None) -> str:
    """Install the chatdesk handler on the root logger.

    Args:
        log_level: Level name; defaults to the LOG_LEVEL setting.

    Returns:
        The effective level name.
    """
    if log_level is None:
        from chatdesk.core.config import get_settings

        log_level = get_settings().log_level
    level = normalize_log_level(log_level)

    handler = logging.StreamHandler()
    handler.addFilter(CorrelationIdFilter())
    handler.addFilter(HttpRequestLogDowngradeFilter(*NOISY_HTTP_LOGGERS))
    handler.setFormatter(
        CorrelationFormatter("%(asctime)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S")
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level))

    for uvicorn_logger in ["uvicorn", "uvicorn.access", "uvicorn.error"]:
        logging.getLogger(uvicorn_logger).setLevel(logging.WARNING)

    set_noisy_http_logger_levels(level)
    logger.debug("Logging configured at %s", level)
    return level
