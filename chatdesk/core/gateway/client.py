"""Provider gateway client.

Turns a stored provider configuration into authenticated, correctly trusted
HTTP calls and reports every outcome in a shape the UI layer can show:
buffered send, streamed send, connection test and model listing.
"""

from __future__ import annotations

import inspect
import json
import logging
import time
import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import aclosing
from typing import Any

import httpx

from chatdesk.core.config import Settings, get_settings
from chatdesk.core.error_types import DiagnosticCategory
from chatdesk.core.exceptions import ChatdeskError
from chatdesk.core.gateway.error_classifier import (
    Diagnostic,
    classify,
    describe,
    to_api_error,
    to_transport_error,
)
from chatdesk.core.gateway.request_builder import (
    PreparedRequest,
    build_chat_request,
    build_models_request,
    build_probe_request,
)
from chatdesk.core.gateway.results import (
    ConnectionTestResult,
    ModelListResult,
    SendResult,
    StreamResult,
)
from chatdesk.core.gateway.stream_decoder import StreamEvent, StreamEventType, decode_stream
from chatdesk.core.gateway.transport import build_transport
from chatdesk.core.logging import api_key_fingerprint, correlation_context
from chatdesk.core.provider_config import ProviderConfig
from chatdesk.core.storage import ConfigStore

logger = logging.getLogger(__name__)

CONNECTION_OK_MESSAGE = "Connection successful! API is responding correctly."

StreamEventHandler = Callable[[StreamEvent], Awaitable[None] | None]


def _text_of(value: Any) -> str | None:
    """Displayable text of a content value: a string or a list of text parts."""
    if isinstance(value, str):
        return value or None
    if isinstance(value, list):
        parts = [
            part.get("text")
            for part in value
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        ]
        joined = "".join(parts)
        return joined or None
    return None


def extract_content(data: Any) -> str:
    """Pull the assistant text out of a buffered response body.

    Tries `choices[0].message.content`, then `choices[0].text`, then a bare
    `response` field, then a bare `content` field. When none of them holds
    text the whole body is returned as JSON so the caller always has
    something to show.
    """
    if isinstance(data, dict):
        choices = data.get("choices")
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            first = choices[0]
            message = first.get("message")
            if isinstance(message, dict):
                content = _text_of(message.get("content"))
                if content:
                    return content
            text = _text_of(first.get("text"))
            if text:
                return text
        for key in ("response", "content"):
            text = _text_of(data.get(key))
            if text:
                return text
    return json.dumps(data, ensure_ascii=False)


def _model_names(entries: list[Any]) -> list[str]:
    names: list[str] = []
    for entry in entries:
        if isinstance(entry, str):
            name = entry
        elif isinstance(entry, dict):
            name = entry.get("id") or entry.get("name") or entry.get("model")
        else:
            continue
        if name:
            names.append(str(name))
    return names


def normalize_models(data: Any) -> list[str]:
    """Flatten a models-listing body into an ordered list of model names.

    Recognized shapes, checked in order: `{"data": [...]}` (OpenAI),
    `{"models": [...]}`, and a bare top-level array. Anything else yields
    an empty list.
    """
    if isinstance(data, dict):
        for key in ("data", "models"):
            entries = data.get(key)
            if isinstance(entries, list):
                return _model_names(entries)
        return []
    if isinstance(data, list):
        return _model_names(data)
    return []


class ProviderGateway:
    """Runs chat operations against stored provider configurations.

    Each call resolves its configuration id once, builds a fresh transport
    and client, and keeps no state between calls. Concurrent calls, even on
    the same configuration, are independent.
    """

    def __init__(self, store: ConfigStore, settings: Settings | None = None) -> None:
        """Initialize the gateway.

        Args:
            store: Configuration store used to resolve configuration ids
            settings: Timeouts and logging switches (defaults to env settings)
        """
        self._store = store
        self._settings = settings or get_settings()

    @property
    def store(self) -> ConfigStore:
        return self._store

    # -- shared plumbing -------------------------------------------------

    def _log_request(self, label: str, config: ProviderConfig, request: PreparedRequest) -> None:
        logger.debug(
            "📤 %s | Config: %s | Provider: %s | URL: %s | Model: %s | Key: %s",
            label,
            config.id,
            config.provider_name,
            request.url,
            request.model or config.model_name,
            api_key_fingerprint(config.api_key),
        )
        if self._settings.log_request_bodies and request.body is not None:
            logger.debug("Request body: %s", json.dumps(request.body, indent=2))

    async def _execute(
        self,
        config: ProviderConfig,
        request: PreparedRequest,
        timeout: httpx.Timeout,
    ) -> httpx.Response:
        """Issue one buffered request.

        Raises:
            ConfigError: If the transport cannot be built
            TransportError: If no response was received
            ApiError: If the response status is not a success
        """
        descriptor = build_transport(config, timeout)
        async with descriptor.client() as client:
            try:
                response = await client.request(
                    request.method,
                    request.url,
                    headers=request.headers,
                    json=request.body,
                )
            except httpx.HTTPError as e:
                logger.error("Request to %s failed: %s: %s", request.url, type(e).__name__, e)
                raise to_transport_error(e, request.url) from e

        if not response.is_success:
            logger.error("API error response %s: %s", response.status_code, response.text[:500])
            raise to_api_error(response, model=request.model)
        return response

    # -- operations ------------------------------------------------------

    async def send(self, message: str, config_id: str | None) -> SendResult:
        """Send one message and wait for the full response.

        Never raises; every failure is returned as a classified diagnostic.
        """
        request_id = str(uuid.uuid4())
        with correlation_context(request_id):
            start_time = time.time()
            try:
                config = self._store.get_config(config_id)
                request = build_chat_request(message, config, streaming=False)
                self._log_request("REQUEST", config, request)

                response = await self._execute(config, request, self._settings.buffered_timeout)
                try:
                    data = response.json()
                except ValueError:
                    logger.warning("Response body is not JSON; returning it as text")
                    return SendResult.ok(response.text, response.text)

                duration_ms = (time.time() - start_time) * 1000
                logger.debug("📥 RESPONSE | Duration: %.0fms", duration_ms)
                return SendResult.ok(extract_content(data), data)

            except ChatdeskError as e:
                diagnostic = classify(e)
                logger.error("❌ Send failed [%s]: %s", diagnostic.category.value, diagnostic.message)
                return SendResult.failed(diagnostic)
            except Exception as e:
                logger.exception("Unexpected error while sending message")
                return SendResult.failed(classify(e))

    async def stream_events(self, message: str, config_id: str | None) -> AsyncIterator[StreamEvent]:
        """Stream one message as chunk events followed by one terminal event.

        Config problems, handshake failures and mid-stream transport errors
        all end the stream with an ERROR event. Closing the generator early
        closes the underlying response.
        """
        request_id = str(uuid.uuid4())
        log = logging.LoggerAdapter(logger, {"correlation_id": request_id})

        try:
            config = self._store.get_config(config_id)
            request = build_chat_request(message, config, streaming=True)
            descriptor = build_transport(config, self._settings.streaming_timeout)
        except ChatdeskError as e:
            log.error("❌ Stream not started: %s", e)
            yield StreamEvent.failure(describe(e))
            return

        log.debug(
            "📤 STREAM | Config: %s | Provider: %s | URL: %s | Model: %s",
            config.id,
            config.provider_name,
            request.url,
            request.model or config.model_name,
        )

        def describe_mid_stream(exc: Exception) -> str:
            return describe(to_transport_error(exc, request.url))

        terminal_sent = False
        try:
            async with descriptor.client() as client:
                async with client.stream(
                    request.method,
                    request.url,
                    headers=request.headers,
                    json=request.body,
                ) as response:
                    if not response.is_success:
                        body = (await response.aread()).decode("utf-8", errors="replace")
                        log.error("Stream API error %s: %s", response.status_code, body[:500])
                        terminal_sent = True
                        yield StreamEvent.failure(
                            describe(to_api_error(response, body=body, model=request.model))
                        )
                        return

                    async for event in decode_stream(response.aiter_bytes(), describe_mid_stream):
                        terminal_sent = event.is_terminal
                        yield event
        except httpx.HTTPError as e:
            if not terminal_sent:
                log.error("Stream request to %s failed: %s: %s", request.url, type(e).__name__, e)
                terminal_sent = True
                yield StreamEvent.failure(describe(to_transport_error(e, request.url)))
        except Exception as e:
            if not terminal_sent:
                log.exception("Unexpected error while streaming")
                terminal_sent = True
                yield StreamEvent.failure(classify(e).message)

    async def send_stream(
        self,
        message: str,
        config_id: str | None,
        on_event: StreamEventHandler,
    ) -> StreamResult:
        """Stream one message, relaying every event to `on_event`.

        `on_event` may be a plain function or a coroutine function.
        """
        result = StreamResult(success=True)
        async with aclosing(self.stream_events(message, config_id)) as events:
            async for event in events:
                outcome = on_event(event)
                if inspect.isawaitable(outcome):
                    await outcome
                if event.type is StreamEventType.ERROR:
                    result = StreamResult(success=False, error=event.error)
        return result

    async def test_connection(self, config_id: str | None) -> ConnectionTestResult:
        """Probe reachability, authentication and model validity."""
        request_id = str(uuid.uuid4())
        with correlation_context(request_id):
            try:
                config = self._store.get_config(config_id)
                request = build_probe_request(config)
                logger.info(
                    "Testing connection to %s (ignore SSL: %s)", request.url, config.ignore_ssl
                )
                self._log_request("PROBE", config, request)

                response = await self._execute(config, request, self._settings.buffered_timeout)
                try:
                    response.json()
                except ValueError:
                    return ConnectionTestResult.failed(
                        Diagnostic(
                            DiagnosticCategory.API_ERROR,
                            f"The server at {request.url} answered, but not with JSON. "
                            "Check if the URL points at a chat-completions endpoint.",
                            response.status_code,
                        )
                    )

                logger.info("✅ Connection test successful for %s", config.provider_name)
                return ConnectionTestResult(success=True, message=CONNECTION_OK_MESSAGE)

            except ChatdeskError as e:
                diagnostic = classify(e)
                logger.error("❌ Connection test failed [%s]: %s", diagnostic.category.value, diagnostic.message)
                return ConnectionTestResult.failed(diagnostic)
            except Exception as e:
                logger.exception("Unexpected error while testing connection")
                return ConnectionTestResult.failed(classify(e))

    async def list_models(self, config_id: str | None) -> ModelListResult:
        """Query the provider's model catalog."""
        request_id = str(uuid.uuid4())
        with correlation_context(request_id):
            try:
                config = self._store.get_config(config_id)
                request = build_models_request(config)
                self._log_request("MODELS", config, request)

                response = await self._execute(config, request, self._settings.models_timeout)
                try:
                    data = response.json()
                except ValueError:
                    logger.warning("Models response from %s is not JSON", request.url)
                    return ModelListResult(success=True, models=[])

                models = normalize_models(data)
                if not models:
                    logger.info("No models recognized in response from %s", request.url)
                return ModelListResult(success=True, models=models)

            except ChatdeskError as e:
                diagnostic = classify(e)
                message = f"Cannot list models: {diagnostic.message}"
                if diagnostic.category is DiagnosticCategory.NOT_FOUND:
                    message += " Your API might not support the /models endpoint."
                logger.error("❌ %s", message)
                return ModelListResult.failed(diagnostic, message)
            except Exception as e:
                logger.exception("Unexpected error while listing models")
                diagnostic = classify(e)
                return ModelListResult.failed(diagnostic, f"Cannot list models: {diagnostic.message}")
