import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional, Union

from chatdesk.core.exceptions import ConfigError

ParamValue = Union[str, int, float, bool]

DEFAULT_CONTEXT_WINDOW = 4096


def new_config_id() -> str:
    return uuid.uuid4().hex


def _clean_params(raw: Any) -> Dict[str, ParamValue]:
    """Validate custom request parameters, keeping their order."""
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("customParams must be an object")
    params: Dict[str, ParamValue] = {}
    for key, value in raw.items():
        if not isinstance(value, (str, int, float, bool)):
            raise ConfigError(
                f"customParams['{key}'] must be a string, number or boolean (got {type(value).__name__})"
            )
        params[str(key)] = value
    return params


def _clean_headers(raw: Any) -> Dict[str, str]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("customHeaders must be an object")
    return {str(name): str(value) for name, value in raw.items()}


_TRUE_TEXT = {"true", "1"}
_FALSE_TEXT = {"false", "0", ""}


def _strict_bool(name: str, value: Any) -> bool:
    """Read a flag that must never turn on by accident.

    Accepts JSON booleans, 0/1 and the texts true/false/1/0. Anything else is
    rejected instead of being coerced by truthiness.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_TEXT:
            return True
        if text in _FALSE_TEXT:
            return False
    raise ConfigError(f"{name} must be true or false (got {value!r})")


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass
class ProviderConfig:
    """A stored set of connection parameters for one chat-completion endpoint"""

    id: str
    provider_name: str
    base_url: str
    api_key: str
    model_name: str
    context_window: int = DEFAULT_CONTEXT_WINDOW
    custom_params: Dict[str, ParamValue] = field(default_factory=dict)
    ignore_ssl: bool = False
    custom_headers: Dict[str, str] = field(default_factory=dict)
    proxy_url: Optional[str] = None
    ca_cert_path: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization"""
        if not self.id:
            raise ConfigError("Configuration id is required")
        if isinstance(self.context_window, bool) or not isinstance(self.context_window, int):
            raise ConfigError(f"contextWindow must be an integer for '{self.provider_name}'")
        if self.context_window <= 0:
            raise ConfigError(f"contextWindow must be positive for '{self.provider_name}'")
        if not isinstance(self.ignore_ssl, bool):
            raise ConfigError(f"ignoreSsl must be a boolean for '{self.provider_name}'")
        self.custom_params = _clean_params(self.custom_params)
        self.custom_headers = _clean_headers(self.custom_headers)

    @property
    def uses_custom_transport(self) -> bool:
        """Check if any trust or proxy option deviates from the defaults"""
        return bool(self.ignore_ssl or self.ca_cert_path or self.proxy_url)

    @property
    def masked_api_key(self) -> str:
        if not self.api_key:
            return ""
        if len(self.api_key) <= 8:
            return "*" * len(self.api_key)
        return f"{self.api_key[:3]}...{self.api_key[-4:]}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProviderConfig":
        """Build a configuration from its camelCase record shape.

        A missing id is generated, so new records can be saved without one.
        """
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be an object")
        context_window = data.get("contextWindow", DEFAULT_CONTEXT_WINDOW)
        if context_window is None:
            context_window = DEFAULT_CONTEXT_WINDOW
        elif isinstance(context_window, str) and context_window.strip().isdigit():
            # Settings forms submit numbers as text
            context_window = int(context_window)
        return cls(
            id=str(data.get("id") or new_config_id()),
            provider_name=str(data.get("providerName") or ""),
            base_url=str(data.get("baseUrl") or ""),
            api_key=str(data.get("apiKey") or ""),
            model_name=str(data.get("modelName") or ""),
            context_window=context_window,
            custom_params=data.get("customParams") or {},
            ignore_ssl=_strict_bool("ignoreSsl", data.get("ignoreSsl")),
            custom_headers=data.get("customHeaders") or {},
            proxy_url=_optional_str(data.get("proxyUrl")),
            ca_cert_path=_optional_str(data.get("caCertPath")),
        )

    def to_dict(self, redact: bool = False) -> Dict[str, Any]:
        """Convert to the camelCase record shape used on disk and over the bridge"""
        return {
            "id": self.id,
            "providerName": self.provider_name,
            "baseUrl": self.base_url,
            "apiKey": self.masked_api_key if redact else self.api_key,
            "modelName": self.model_name,
            "contextWindow": self.context_window,
            "customParams": dict(self.custom_params),
            "ignoreSsl": self.ignore_ssl,
            "customHeaders": dict(self.custom_headers),
            "proxyUrl": self.proxy_url,
            "caCertPath": self.ca_cert_path,
        }


@dataclass(frozen=True)
class ChatMessage:
    role: Literal["user", "assistant"]
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}
