"""Application settings for chatdesk.

All values are loaded once from environment variables (and a local `.env`
file) using the schema in `chatdesk.core.config.schema`.
"""

from dataclasses import dataclass
from pathlib import Path

import httpx

from chatdesk.core.config.schema import ConfigSchema
from chatdesk.core.config.validation import load_env_var


@dataclass(frozen=True)
class Settings:
    """Resolved settings snapshot."""

    log_level: str = "INFO"
    log_request_bodies: bool = False
    home_dir: str = "~/.chatdesk"
    host: str = "127.0.0.1"
    port: int = 8765
    request_timeout: float = 90.0
    models_request_timeout: float = 30.0
    streaming_connect_timeout: float = 30.0
    streaming_read_timeout: float | None = None

    @classmethod
    def load(cls) -> "Settings":
        return cls(
            log_level=load_env_var(ConfigSchema.LOG_LEVEL).split()[0].upper(),
            log_request_bodies=load_env_var(ConfigSchema.LOG_REQUEST_BODIES),
            home_dir=load_env_var(ConfigSchema.CHATDESK_HOME),
            host=load_env_var(ConfigSchema.HOST),
            port=load_env_var(ConfigSchema.PORT),
            request_timeout=load_env_var(ConfigSchema.REQUEST_TIMEOUT),
            models_request_timeout=load_env_var(ConfigSchema.MODELS_REQUEST_TIMEOUT),
            streaming_connect_timeout=load_env_var(ConfigSchema.STREAMING_CONNECT_TIMEOUT_SECONDS),
            streaming_read_timeout=load_env_var(ConfigSchema.STREAMING_READ_TIMEOUT_SECONDS),
        )

    @property
    def store_path(self) -> Path:
        return Path(self.home_dir).expanduser() / "config.json"

    @property
    def buffered_timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.request_timeout)

    @property
    def models_timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.models_request_timeout)

    @property
    def streaming_timeout(self) -> httpx.Timeout:
        # read=None keeps a silent stream open until the server closes it
        return httpx.Timeout(
            self.request_timeout,
            connect=self.streaming_connect_timeout,
            read=self.streaming_read_timeout,
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call reloads the environment.

    Used by the test suite after it modifies environment variables.
    """
    global _settings
    _settings = None
