"""Failure classification for provider calls.

Maps transport failures (DNS, refused connections, timeouts, TLS) and HTTP
failures (status code + body) onto a small set of `DiagnosticCategory`
values with messages a human operator can act on. Send, the stream
handshake, the connection test and model listing all report through here.
"""

from __future__ import annotations

import json
import logging
import socket
import ssl
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

import httpx

from chatdesk.core.error_types import DiagnosticCategory
from chatdesk.core.exceptions import (
    ApiError,
    ConfigError,
    ConfigNotFoundError,
    StorageError,
    TransportError,
    TransportErrorKind,
)

logger = logging.getLogger(__name__)

BODY_PREVIEW_LIMIT = 200

_DNS_MARKERS = (
    "enotfound",
    "eai_again",
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "temporary failure in name resolution",
    "no address associated with hostname",
    "name resolution",
)
_REFUSED_MARKERS = ("econnrefused", "connection refused", "actively refused")
_TIMEOUT_MARKERS = ("etimedout", "timed out", "timeout")
_TLS_MARKERS = (
    "unable_to_verify_leaf_signature",
    "certificate_verify_failed",
    "self_signed_cert",
    "self-signed",
    "self signed",
    "certificate",
    "[ssl",
)


@dataclass(frozen=True)
class Diagnostic:
    """Human-readable, classified explanation of a failure."""

    category: DiagnosticCategory
    message: str
    status_code: int | None = None

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "message": self.message,
            "statusCode": self.status_code,
        }


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def _matches(text: str, markers: tuple[str, ...]) -> bool:
    lowered = text.lower()
    return any(marker in lowered for marker in markers)


def _chain_text(exc: BaseException) -> str:
    parts = []
    for link in _exception_chain(exc):
        parts.append(str(link))
        code = getattr(link, "code", None)
        if isinstance(code, str):
            parts.append(code)
    return " | ".join(parts)


def _transport_kind(exc: BaseException) -> TransportErrorKind:
    chain = list(_exception_chain(exc))

    if any(isinstance(link, (httpx.TimeoutException, TimeoutError)) for link in chain):
        return TransportErrorKind.TIMEOUT
    for link in chain:
        if isinstance(link, socket.gaierror):
            return TransportErrorKind.DNS
        if isinstance(link, ConnectionRefusedError):
            return TransportErrorKind.CONNECTION_REFUSED
        if isinstance(link, ssl.SSLError):
            return TransportErrorKind.TLS

    text = _chain_text(exc)
    if _matches(text, _DNS_MARKERS):
        return TransportErrorKind.DNS
    if _matches(text, _REFUSED_MARKERS):
        return TransportErrorKind.CONNECTION_REFUSED
    if _matches(text, _TLS_MARKERS):
        return TransportErrorKind.TLS
    if _matches(text, _TIMEOUT_MARKERS):
        return TransportErrorKind.TIMEOUT
    return TransportErrorKind.OTHER


def _request_url(exc: BaseException) -> str | None:
    if isinstance(exc, httpx.RequestError):
        try:
            return str(exc.request.url)
        except RuntimeError:
            # .request is unset when the exception was raised outside a client
            return None
    return None


def to_transport_error(exc: BaseException, url: str | None = None) -> TransportError:
    """Wrap a low-level network exception in a classified TransportError."""
    if isinstance(exc, TransportError):
        return exc

    detail = str(exc) or type(exc).__name__
    root = list(_exception_chain(exc))[-1]
    root_text = str(root)
    cause = root_text if root is not exc and root_text and root_text != detail else None

    return TransportError(
        kind=_transport_kind(exc),
        url=url or _request_url(exc) or "the API server",
        detail=detail,
        cause=cause,
    )


def to_api_error(response: httpx.Response, body: str | None = None, model: str | None = None) -> ApiError:
    """Wrap a non-success response in an ApiError."""
    if body is None:
        body = response.text
    try:
        url = str(response.request.url)
    except RuntimeError:
        url = ""
    return ApiError(status_code=response.status_code, body=body, url=url, model=model)


def classify_transport_error(error: TransportError) -> Diagnostic:
    url = error.url
    if error.kind is TransportErrorKind.DNS:
        return Diagnostic(
            DiagnosticCategory.DNS_FAILURE,
            f"Cannot reach {url}. DNS lookup failed. Please check the URL.",
        )
    if error.kind is TransportErrorKind.CONNECTION_REFUSED:
        return Diagnostic(
            DiagnosticCategory.CONNECTION_REFUSED,
            f"Connection refused to {url}. Is the server running?",
        )
    if error.kind is TransportErrorKind.TIMEOUT:
        return Diagnostic(DiagnosticCategory.TIMEOUT, f"Connection to {url} timed out.")
    if error.kind is TransportErrorKind.TLS:
        return Diagnostic(
            DiagnosticCategory.SSL_ERROR,
            'SSL certificate error. Enable "Ignore SSL" in settings or add a custom CA certificate.',
        )

    message = f"Network error: {error.detail}"
    if error.cause:
        message += f"\nCause: {error.cause}"
    return Diagnostic(DiagnosticCategory.NETWORK_ERROR, message)


def _error_description(body: str) -> str | None:
    """Pull the error text out of a JSON error body, if there is one."""
    try:
        data = json.loads(body)
    except (ValueError, TypeError):
        return None
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, str) and error:
        return error
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message:
            return message
    message = data.get("message")
    if isinstance(message, str) and message:
        return message
    return None


def classify_api_error(error: ApiError) -> Diagnostic:
    status = error.status_code
    body = error.body or ""
    preview = body[:BODY_PREVIEW_LIMIT]

    if status == 404:
        return Diagnostic(
            DiagnosticCategory.NOT_FOUND,
            "404 Not Found. Check if the URL is correct. "
            "Expected format: https://host/v1/chat/completions",
            status,
        )
    if status == 401:
        return Diagnostic(
            DiagnosticCategory.UNAUTHORIZED, "401 Unauthorized. Check your API key.", status
        )
    if status == 403:
        return Diagnostic(
            DiagnosticCategory.FORBIDDEN,
            "403 Forbidden. Check your API key and permissions.",
            status,
        )
    if status == 400:
        description = _error_description(body)
        if description and "model" in description.lower():
            model = f' "{error.model}"' if error.model else ""
            return Diagnostic(
                DiagnosticCategory.INVALID_MODEL,
                f"400 Invalid Model. The model{model} doesn't exist on this server. "
                "Try listing available models.",
                status,
            )
        return Diagnostic(
            DiagnosticCategory.BAD_REQUEST,
            f"400 Bad Request: {description or preview}",
            status,
        )
    if status == 500:
        return Diagnostic(
            DiagnosticCategory.SERVER_ERROR,
            "500 Server Error. The API server encountered an error.",
            status,
        )
    return Diagnostic(DiagnosticCategory.API_ERROR, f"API Error ({status}): {preview}", status)


def _classify(failure: BaseException) -> Diagnostic:
    if isinstance(failure, ApiError):
        return classify_api_error(failure)
    if isinstance(failure, TransportError):
        return classify_transport_error(failure)
    if isinstance(failure, ConfigNotFoundError):
        return Diagnostic(DiagnosticCategory.CONFIG_NOT_FOUND, str(failure))
    if isinstance(failure, ConfigError):
        return Diagnostic(DiagnosticCategory.CONFIG_ERROR, str(failure))
    if isinstance(failure, StorageError):
        return Diagnostic(DiagnosticCategory.CONFIG_ERROR, f"Configuration store error: {failure}")
    if isinstance(failure, httpx.HTTPStatusError):
        return classify_api_error(to_api_error(failure.response))
    if isinstance(failure, (httpx.TransportError, OSError)):
        return classify_transport_error(to_transport_error(failure))
    if isinstance(failure, httpx.HTTPError):
        return classify_transport_error(to_transport_error(failure))
    if isinstance(getattr(failure, "code", None), str):
        # errno-style codes such as ENOTFOUND or ETIMEDOUT
        return classify_transport_error(to_transport_error(failure))
    return Diagnostic(
        DiagnosticCategory.UNEXPECTED_ERROR, str(failure) or "Unknown error occurred"
    )


def classify(failure: BaseException) -> Diagnostic:
    """Classify any failure into a Diagnostic. Never raises."""
    try:
        return _classify(failure)
    except Exception as e:  # pragma: no cover - classification must not fail
        logger.error("Failed to classify %s: %s", type(failure).__name__, e)
        return Diagnostic(
            DiagnosticCategory.UNEXPECTED_ERROR, str(failure) or "Unknown error occurred"
        )


def describe(failure: BaseException) -> str:
    """Shortcut for the diagnostic message of a failure."""
    return classify(failure).message
