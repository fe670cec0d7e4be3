"""Trust and transport options for a single outbound call.

A `TransportDescriptor` captures TLS verification, custom CA trust, proxy
routing and default headers for one provider configuration. Descriptors are
built per call so configuration edits apply to the very next request.
"""

from __future__ import annotations

import logging
import ssl
from dataclasses import dataclass, field
from pathlib import Path

import certifi
import httpx

from chatdesk.core.exceptions import ConfigError
from chatdesk.core.provider_config import ProviderConfig

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = httpx.Timeout(90.0)


@dataclass(frozen=True)
class TransportDescriptor:
    """Connection options for one outbound call.

    Attributes:
        verify: True for the standard trust store, False to skip peer
            verification, or an SSLContext carrying extra trusted roots
        proxy: Proxy URL all connections are routed through, if any
        headers: Default headers applied to every request of the client
        timeout: Transport connect/read/write/pool timeouts
    """

    verify: bool | ssl.SSLContext = True
    proxy: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    timeout: httpx.Timeout = field(default_factory=lambda: DEFAULT_TIMEOUT)

    @property
    def is_default(self) -> bool:
        return self.verify is True and self.proxy is None

    @property
    def verifies_peer(self) -> bool:
        return self.verify is not False

    def client(self) -> httpx.AsyncClient:
        """Create a fresh async client; the caller owns and closes it."""
        return httpx.AsyncClient(
            verify=self.verify,
            proxy=self.proxy,
            headers=self.headers,
            timeout=self.timeout,
        )


def _trust_context(ca_cert_path: Path) -> ssl.SSLContext:
    """Standard trust store plus one extra PEM root."""
    context = ssl.create_default_context(cafile=certifi.where())
    try:
        context.load_verify_locations(cafile=str(ca_cert_path))
    except (ssl.SSLError, OSError) as e:
        raise ConfigError(f"Cannot load CA certificate from {ca_cert_path}: {e}") from e
    return context


def build_transport(
    config: ProviderConfig, timeout: httpx.Timeout | None = None
) -> TransportDescriptor:
    """Build the transport descriptor for one outbound call.

    Args:
        config: Provider configuration the call targets
        timeout: Transport timeouts; defaults to 90s for every phase

    Returns:
        TransportDescriptor for this call

    Raises:
        ConfigError: If the custom CA certificate exists but cannot be loaded
    """
    timeout = timeout or DEFAULT_TIMEOUT
    headers = dict(config.custom_headers)

    if not config.uses_custom_transport:
        return TransportDescriptor(headers=headers, timeout=timeout)

    verify: bool | ssl.SSLContext = True
    if config.ignore_ssl:
        logger.warning(
            "SSL certificate verification is disabled for provider '%s'", config.provider_name
        )
        verify = False
    elif config.ca_cert_path:
        ca_path = Path(config.ca_cert_path).expanduser()
        if ca_path.is_file():
            logger.info("Loading custom CA certificate from: %s", ca_path)
            verify = _trust_context(ca_path)
        else:
            logger.warning("Custom CA certificate %s not found; using the default trust store", ca_path)

    proxy = config.proxy_url or None
    if proxy:
        logger.debug("Routing provider '%s' through the configured proxy", config.provider_name)

    return TransportDescriptor(verify=verify, proxy=proxy, headers=headers, timeout=timeout)
