from chatdesk.api.models.endpoint_requests import (
    ActiveConfigRequest,
    ChatRequest,
    ConfigListRequest,
)

__all__ = ["ActiveConfigRequest", "ChatRequest", "ConfigListRequest"]
