"""Declarative schema for environment variable configuration.

This module provides a single source of truth for all environment variables,
including automatic type coercion, validation, and documentation generation.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class EnvVarSpec:
    """Specification for a single environment variable.

    Attributes:
        name: Environment variable name (e.g., "PORT", "LOG_LEVEL")
        default: Default value if env var not set
        type_hint: Type for validation (int, str, float, bool)
        description: Human-readable description for docs
        validator: Optional custom validation function
        coerce: Optional function to convert string to target type
    """

    name: str
    default: Any
    type_hint: type
    description: str
    validator: Callable[[Any], bool] | None = None
    coerce: Callable[[str], Any] | None = None


class ConfigSchema:
    """Registry of all configuration environment variables."""

    # === Logging ===

    LOG_LEVEL = EnvVarSpec(
        name="LOG_LEVEL",
        default="INFO",
        type_hint=str,
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        validator=lambda x: x.split()[0].upper() in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    )

    LOG_REQUEST_BODIES = EnvVarSpec(
        name="LOG_REQUEST_BODIES",
        default=False,
        type_hint=bool,
        description="Log outgoing request bodies at DEBUG level (API keys are never logged)",
    )

    # === Storage ===

    CHATDESK_HOME = EnvVarSpec(
        name="CHATDESK_HOME",
        default="~/.chatdesk",
        type_hint=str,
        description="Directory holding the provider configuration store",
    )

    # === Bridge server ===

    HOST = EnvVarSpec(
        name="HOST",
        default="127.0.0.1",
        type_hint=str,
        description="Bridge server host address to bind to",
    )

    PORT = EnvVarSpec(
        name="PORT",
        default=8765,
        type_hint=int,
        description="Bridge server port number",
        validator=lambda x: 1 <= x <= 65535,
    )

    # === Timeouts ===

    REQUEST_TIMEOUT = EnvVarSpec(
        name="REQUEST_TIMEOUT",
        default=90.0,
        type_hint=float,
        description="Timeout in seconds for buffered chat requests and connection tests",
        validator=lambda x: x > 0,
    )

    MODELS_REQUEST_TIMEOUT = EnvVarSpec(
        name="MODELS_REQUEST_TIMEOUT",
        default=30.0,
        type_hint=float,
        description="Timeout in seconds for model listing requests",
        validator=lambda x: x > 0,
    )

    STREAMING_CONNECT_TIMEOUT_SECONDS = EnvVarSpec(
        name="STREAMING_CONNECT_TIMEOUT_SECONDS",
        default=30.0,
        type_hint=float,
        description="Connect timeout for streaming requests",
        validator=lambda x: x > 0,
    )

    STREAMING_READ_TIMEOUT_SECONDS = EnvVarSpec(
        name="STREAMING_READ_TIMEOUT_SECONDS",
        default=None,
        type_hint=float,
        description="Idle read timeout for streaming SSE responses (None = unlimited)",
        validator=lambda x: x is None or x > 0,
    )

    @classmethod
    def all_specs(cls) -> dict[str, EnvVarSpec]:
        """Return every EnvVarSpec declared on the schema, keyed by name."""
        return {
            value.name: value
            for value in vars(cls).values()
            if isinstance(value, EnvVarSpec)
        }
