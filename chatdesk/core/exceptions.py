"""Exception hierarchy for chatdesk.

All exceptions inherit from ChatdeskError, allowing callers to catch every
library error with a single except clause. None of these cross the UI
boundary raw: the gateway turns them into a `Diagnostic` first.
"""

from __future__ import annotations

from enum import Enum


class ChatdeskError(Exception):
    """Base exception for all chatdesk errors."""

    pass


class ConfigError(ChatdeskError):
    """Raised when a provider configuration cannot be used.

    Covers a blank or unparsable base URL, an invalid configuration record
    and an unreadable custom CA certificate. Always raised before any
    network I/O is attempted.
    """

    pass


class ConfigNotFoundError(ConfigError):
    """Raised when a configuration id does not resolve in the store."""

    def __init__(self, config_id: str | None) -> None:
        self.config_id = config_id
        super().__init__("Configuration not found")

    def __repr__(self) -> str:
        return f"ConfigNotFoundError(config_id={self.config_id!r})"


ConfigNotFound = ConfigNotFoundError


class TransportErrorKind(str, Enum):
    """Underlying condition of a failure that happened before (or instead of) a response."""

    DNS = "dns"
    CONNECTION_REFUSED = "connection_refused"
    TIMEOUT = "timeout"
    TLS = "tls"
    OTHER = "other"


class TransportError(ChatdeskError):
    """The request never produced a usable response.

    Attributes:
        kind: Classified underlying condition
        url: Request URL
        detail: Message of the original exception
        cause: Message of the root cause, when distinct from `detail`
    """

    def __init__(
        self,
        kind: TransportErrorKind,
        url: str,
        detail: str,
        cause: str | None = None,
    ) -> None:
        self.kind = kind
        self.url = url
        self.detail = detail
        self.cause = cause
        super().__init__(f"{kind.value} error for {url}: {detail}")


class ApiError(ChatdeskError):
    """A response arrived with a non-success HTTP status.

    Attributes:
        status_code: HTTP status code
        body: Response body text
        url: Request URL
        model: Model name that was requested, used for 400 diagnostics
    """

    def __init__(
        self,
        status_code: int,
        body: str,
        url: str,
        model: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        self.url = url
        self.model = model

        body_preview = body[:200] if body else "(empty)"
        if len(body) > 200:
            body_preview += "..."

        super().__init__(f"HTTP {status_code} for {url}\nResponse: {body_preview}")


class DecodeError(ChatdeskError):
    """A server-sent-event line could not be decoded.

    Raised inside the stream decoder and swallowed per line.
    """

    def __init__(self, line: str, reason: str) -> None:
        self.line = line
        self.reason = reason
        super().__init__(f"Cannot decode stream line: {reason}")


class StorageError(ChatdeskError):
    """The configuration store backend failed to read or write."""

    pass
