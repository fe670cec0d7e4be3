import sys
from datetime import datetime
from typing import Any

import uvicorn
from fastapi import FastAPI

from chatdesk import __version__
from chatdesk.api.endpoints import router as api_router
from chatdesk.core.config import Settings, get_settings, validate_all
from chatdesk.core.gateway import ProviderGateway
from chatdesk.core.logging import configure_root_logging
from chatdesk.core.storage import ConfigStore, JsonFileKeyValueStore


def create_app(store: ConfigStore | None = None, settings: Settings | None = None) -> FastAPI:
    """Build the bridge app around a configuration store.

    Args:
        store: Configuration store; defaults to the JSON file under CHATDESK_HOME
        settings: Settings snapshot; defaults to the environment
    """
    settings = settings or get_settings()
    if store is None:
        store = ConfigStore(JsonFileKeyValueStore(settings.store_path))

    app = FastAPI(title="chatdesk", version=__version__)
    app.state.config_store = store
    app.state.gateway = ProviderGateway(store, settings)
    app.include_router(api_router)

    @app.get("/health")
    async def health_check() -> dict[str, Any]:
        """Health check endpoint"""
        return {
            "status": "healthy",
            "version": __version__,
            "timestamp": datetime.now().isoformat(),
        }

    return app


def main(host: str | None = None, port: int | None = None) -> None:
    errors = validate_all()
    if errors:
        print("❌ Invalid configuration:")
        for error in errors:
            print(f"   {error}")
        sys.exit(1)

    settings = get_settings()
    log_level = configure_root_logging(settings.log_level)
    host = host or settings.host
    port = port or settings.port

    print(f"🚀 chatdesk bridge v{__version__}")
    print(f"   Config store : {settings.store_path}")
    print(f"   Request Timeout : {settings.request_timeout}s")
    print(f"   Server: {host}:{port}")
    print("")

    uvicorn.run(
        create_app(settings=settings),
        host=host,
        port=port,
        log_level=log_level.lower(),
        access_log=log_level == "DEBUG",
    )


if __name__ == "__main__":
    main()
