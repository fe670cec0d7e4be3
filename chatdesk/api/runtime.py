"""FastAPI dependency injection for the configuration store and gateway.

Both objects are owned by the FastAPI app (`app.state`), so tests can build
an app around an in-memory store without touching module globals.
"""

from fastapi import Request

from chatdesk.core.gateway import ProviderGateway
from chatdesk.core.storage import ConfigStore


def get_config_store(request: Request) -> ConfigStore:
    """Return the ConfigStore owned by the FastAPI app.

    Raises:
        TypeError: If app.state.config_store is missing or of the wrong type
    """
    store = getattr(request.app.state, "config_store", None)
    if not isinstance(store, ConfigStore):
        raise TypeError(
            f"app.state.config_store must be ConfigStore, got {type(store).__name__}"
        )
    return store


def get_gateway(request: Request) -> ProviderGateway:
    """Return the ProviderGateway owned by the FastAPI app.

    Raises:
        TypeError: If app.state.gateway is missing or of the wrong type
    """
    gateway = getattr(request.app.state, "gateway", None)
    if not isinstance(gateway, ProviderGateway):
        raise TypeError(
            f"app.state.gateway must be ProviderGateway, got {type(gateway).__name__}"
        )
    return gateway
