"""Shared pytest configuration and fixtures for chatdesk tests."""

import pytest

from chatdesk.core.config import Settings, reset_settings
from chatdesk.core.config.schema import ConfigSchema
from chatdesk.core.gateway import ProviderGateway
from chatdesk.core.provider_config import ProviderConfig
from chatdesk.core.storage import ConfigStore, InMemoryKeyValueStore

# Import HTTP mocking fixtures from fixtures module
pytest_plugins = ["tests.fixtures.mock_http"]

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests (fast, no external deps)")


def pytest_collection_modifyitems(config, items):
    """Add markers to tests based on their location."""
    for item in items:
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def isolated_settings_env(monkeypatch, tmp_path):
    """Run every test against default settings and a throwaway CHATDESK_HOME.

    A developer's own environment or .env file must not leak into tests.
    """
    for name in ConfigSchema.all_specs():
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("CHATDESK_HOME", str(tmp_path / "chatdesk-home"))
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings():
    """Settings with defaults, independent of the environment."""
    return Settings()


@pytest.fixture
def config_store():
    """Configuration store on an in-memory backend."""
    return ConfigStore(InMemoryKeyValueStore())


@pytest.fixture
def provider_config():
    """A plain OpenAI configuration (not yet stored)."""
    return ProviderConfig(
        id="cfg-openai",
        provider_name="OpenAI",
        base_url=OPENAI_CHAT_URL,
        api_key="sk-test-1234567890abcd",
        model_name="gpt-4",
    )


@pytest.fixture
def saved_config(config_store, provider_config):
    """`provider_config` stored and made active."""
    config_store.save_config(provider_config)
    config_store.set_active_config_id(provider_config.id)
    return provider_config


@pytest.fixture
def gateway(config_store, settings):
    return ProviderGateway(config_store, settings)
