"""Diagnostic categories for chatdesk.

Every failure reported to the UI layer is tagged with one of these.
"""

from enum import Enum


class DiagnosticCategory(str, Enum):
    """Failure categories shared by send, streaming, connection test and model listing."""

    # Local, detected before any network I/O
    CONFIG_ERROR = "config_error"
    CONFIG_NOT_FOUND = "config_not_found"

    # Transport level (no response received)
    DNS_FAILURE = "dns_failure"
    CONNECTION_REFUSED = "connection_refused"
    TIMEOUT = "timeout"
    SSL_ERROR = "ssl_error"
    NETWORK_ERROR = "network_error"

    # HTTP level (non-success status)
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    INVALID_MODEL = "invalid_model"
    BAD_REQUEST = "bad_request"
    SERVER_ERROR = "server_error"
    API_ERROR = "api_error"

    # Catch-all
    UNEXPECTED_ERROR = "unexpected_error"
