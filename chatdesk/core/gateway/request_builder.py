"""Outgoing request assembly for chat-completion providers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx

from chatdesk.core.exceptions import ConfigError
from chatdesk.core.gateway.endpoints import derive_models_url
from chatdesk.core.provider_config import ChatMessage, ProviderConfig

PROBE_PROMPT = "Hi"
PROBE_MAX_TOKENS = 5


@dataclass(frozen=True)
class PreparedRequest:
    """A fully assembled HTTP request, ready to hand to httpx."""

    url: str
    method: str
    headers: dict[str, str] = field(default_factory=dict)
    body: dict[str, Any] | None = None

    @property
    def model(self) -> str | None:
        if self.body is None:
            return None
        model = self.body.get("model")
        return model if isinstance(model, str) else None


def validate_base_url(base_url: str) -> str:
    """Check that a base URL is usable before any I/O.

    Returns:
        The stripped URL

    Raises:
        ConfigError: If the URL is blank, unparsable or not absolute http(s)
    """
    if not base_url or not base_url.strip():
        raise ConfigError("API Base URL is empty. Please configure a valid URL in Settings.")
    url = base_url.strip()
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError, ValueError) as e:
        raise ConfigError(
            f'Invalid API URL: "{url}". Please ensure it includes the protocol (e.g., https://)'
        ) from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ConfigError(
            f'Invalid API URL: "{url}". Please ensure it includes the protocol (e.g., https://)'
        )
    return url


def build_headers(config: ProviderConfig, json_body: bool = True) -> dict[str, str]:
    """Bearer auth plus JSON content type; custom headers win on collision."""
    headers: dict[str, str] = {}
    if json_body:
        headers["Content-Type"] = "application/json"
    headers["Authorization"] = f"Bearer {config.api_key}"
    headers.update(config.custom_headers)
    return headers


def build_chat_request(
    message: str, config: ProviderConfig, streaming: bool = False
) -> PreparedRequest:
    """Assemble a chat-completions POST for a single user message.

    Custom parameters are merged last, so they can override `model`,
    `messages` or `stream`.

    Raises:
        ConfigError: If the configuration's base URL is unusable
    """
    url = validate_base_url(config.base_url)

    body: dict[str, Any] = {
        "model": config.model_name,
        "messages": [ChatMessage(role="user", content=message).to_dict()],
    }
    if streaming:
        body["stream"] = True
    body.update(config.custom_params)

    return PreparedRequest(url=url, method="POST", headers=build_headers(config), body=body)


def build_probe_request(config: ProviderConfig) -> PreparedRequest:
    """Assemble the minimal request used to test a connection.

    Custom parameters are not merged into the probe body.
    """
    url = validate_base_url(config.base_url)
    body: dict[str, Any] = {
        "model": config.model_name,
        "messages": [ChatMessage(role="user", content=PROBE_PROMPT).to_dict()],
        "max_tokens": PROBE_MAX_TOKENS,
    }
    return PreparedRequest(url=url, method="POST", headers=build_headers(config), body=body)


def build_models_request(config: ProviderConfig) -> PreparedRequest:
    """Assemble the GET for the models catalog derived from the base URL."""
    url = validate_base_url(config.base_url)
    return PreparedRequest(
        url=derive_models_url(url),
        method="GET",
        headers=build_headers(config, json_body=False),
    )
