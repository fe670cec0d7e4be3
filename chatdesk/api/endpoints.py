"""Local HTTP bridge between a UI and the provider gateway.

Configuration routes manage the store; chat routes relay to the gateway.
Gateway results keep their `{success, ...}` shape with HTTP 200, so a UI
can render every outcome the same way.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from chatdesk.api.models.endpoint_requests import (
    ActiveConfigRequest,
    ChatRequest,
    ConfigListRequest,
)
from chatdesk.api.runtime import get_config_store, get_gateway
from chatdesk.api.services.error_handling import ErrorResponseBuilder
from chatdesk.api.services.streaming import sse_frames, streaming_response
from chatdesk.core.exceptions import ConfigError, StorageError
from chatdesk.core.gateway import ProviderGateway
from chatdesk.core.provider_config import ProviderConfig
from chatdesk.core.storage import ConfigStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/configs", response_model=None)
async def get_configs(
    request: ConfigListRequest = Depends(ConfigListRequest.from_fastapi),
    store: ConfigStore = Depends(get_config_store),
) -> list[dict[str, Any]] | JSONResponse:
    """List stored configurations; API keys are masked unless `reveal=true`."""
    try:
        configs = store.get_configs()
    except (StorageError, ConfigError) as e:
        return ErrorResponseBuilder.storage_error(str(e))
    return [config.to_dict(redact=not request.reveal) for config in configs]


@router.put("/configs", response_model=None)
async def save_config(
    payload: dict[str, Any] = Body(...),
    store: ConfigStore = Depends(get_config_store),
) -> dict[str, Any] | JSONResponse:
    """Insert or replace a configuration; a missing id is generated."""
    try:
        config = ProviderConfig.from_dict(payload)
    except ConfigError as e:
        return ErrorResponseBuilder.invalid_config(str(e))

    try:
        store.save_config(config)
    except StorageError as e:
        return ErrorResponseBuilder.storage_error(str(e))
    logger.info("Saved configuration %s (%s)", config.id, config.provider_name)
    return {"success": True, "id": config.id}


@router.delete("/configs/{config_id}", response_model=None)
async def delete_config(
    config_id: str,
    store: ConfigStore = Depends(get_config_store),
) -> dict[str, Any] | JSONResponse:
    try:
        store.delete_config(config_id)
    except StorageError as e:
        return ErrorResponseBuilder.storage_error(str(e))
    return {"success": True}


@router.get("/active-config", response_model=None)
async def get_active_config_id(
    store: ConfigStore = Depends(get_config_store),
) -> dict[str, Any] | JSONResponse:
    try:
        return {"activeConfigId": store.get_active_config_id()}
    except StorageError as e:
        return ErrorResponseBuilder.storage_error(str(e))


@router.put("/active-config", response_model=None)
async def set_active_config_id(
    request: ActiveConfigRequest,
    store: ConfigStore = Depends(get_config_store),
) -> dict[str, Any] | JSONResponse:
    try:
        store.set_active_config_id(request.config_id)
    except StorageError as e:
        return ErrorResponseBuilder.storage_error(str(e))
    return {"success": True}


@router.post("/chat/send")
async def send(
    request: ChatRequest,
    gateway: ProviderGateway = Depends(get_gateway),
) -> dict[str, Any]:
    result = await gateway.send(request.message, request.config_id)
    return result.to_dict()


@router.post("/chat/stream", response_model=None)
async def send_stream(
    request: ChatRequest,
    gateway: ProviderGateway = Depends(get_gateway),
) -> Any:
    """Stream the reply as SSE frames: `chunk` events, then one `end` or `error`."""
    events = gateway.stream_events(request.message, request.config_id)
    return streaming_response(stream=sse_frames(events))


@router.post("/configs/{config_id}/test")
async def test_connection(
    config_id: str,
    gateway: ProviderGateway = Depends(get_gateway),
) -> dict[str, Any]:
    result = await gateway.test_connection(config_id)
    return result.to_dict()


@router.get("/configs/{config_id}/models")
async def list_models(
    config_id: str,
    gateway: ProviderGateway = Depends(get_gateway),
) -> dict[str, Any]:
    result = await gateway.list_models(config_id)
    return result.to_dict()
