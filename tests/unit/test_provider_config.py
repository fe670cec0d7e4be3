import pytest

from chatdesk.core.exceptions import ConfigError
from chatdesk.core.provider_config import DEFAULT_CONTEXT_WINDOW, ChatMessage, ProviderConfig

RECORD = {
    "id": "cfg-1",
    "providerName": "OpenRouter",
    "baseUrl": "https://openrouter.ai/api/v1/chat/completions",
    "apiKey": "sk-or-abcdefghijkl",
    "modelName": "meta-llama/llama-3-8b",
    "contextWindow": 8192,
    "customParams": {"temperature": 0.7, "top_p": 1, "safe_mode": True, "user": "me"},
    "ignoreSsl": False,
    "customHeaders": {"HTTP-Referer": "https://example.com"},
    "proxyUrl": None,
    "caCertPath": None,
}


@pytest.mark.unit
class TestProviderConfig:
    def test_round_trip_record(self):
        config = ProviderConfig.from_dict(RECORD)

        assert config.provider_name == "OpenRouter"
        assert config.to_dict() == RECORD

    def test_custom_params_keep_order(self):
        config = ProviderConfig.from_dict(RECORD)

        assert list(config.custom_params) == ["temperature", "top_p", "safe_mode", "user"]

    def test_missing_id_is_generated(self):
        record = {key: value for key, value in RECORD.items() if key != "id"}

        first = ProviderConfig.from_dict(record)
        second = ProviderConfig.from_dict(record)

        assert first.id and second.id
        assert first.id != second.id

    def test_defaults_for_optional_fields(self):
        config = ProviderConfig.from_dict(
            {"providerName": "p", "baseUrl": "http://h/v1/chat/completions", "modelName": "m"}
        )

        assert config.context_window == DEFAULT_CONTEXT_WINDOW
        assert config.custom_params == {}
        assert config.custom_headers == {}
        assert config.api_key == ""
        assert not config.uses_custom_transport

    def test_context_window_from_text(self):
        config = ProviderConfig.from_dict({**RECORD, "contextWindow": "32000"})

        assert config.context_window == 32000

    @pytest.mark.parametrize("value", [0, -1, "lots", 1.5, True])
    def test_invalid_context_window(self, value):
        with pytest.raises(ConfigError, match="contextWindow"):
            ProviderConfig.from_dict({**RECORD, "contextWindow": value})

    def test_nested_custom_param_rejected(self):
        with pytest.raises(ConfigError, match="customParams"):
            ProviderConfig.from_dict({**RECORD, "customParams": {"stop": ["\n"]}})

    def test_blank_optional_strings_become_none(self):
        config = ProviderConfig.from_dict({**RECORD, "proxyUrl": "  ", "caCertPath": ""})

        assert config.proxy_url is None
        assert config.ca_cert_path is None

    def test_redacted_record_masks_key(self):
        record = ProviderConfig.from_dict(RECORD).to_dict(redact=True)

        assert record["apiKey"] == "sk-...ijkl"

    def test_short_key_fully_masked(self):
        config = ProviderConfig.from_dict({**RECORD, "apiKey": "short"})

        assert config.masked_api_key == "*****"

    def test_uses_custom_transport(self):
        assert ProviderConfig.from_dict({**RECORD, "ignoreSsl": True}).uses_custom_transport
        assert ProviderConfig.from_dict({**RECORD, "proxyUrl": "http://p:1"}).uses_custom_transport

    @pytest.mark.parametrize("value", ["false", "False", "0", "", 0, False, None])
    def test_ignore_ssl_false_values(self, value):
        config = ProviderConfig.from_dict({**RECORD, "ignoreSsl": value})

        assert config.ignore_ssl is False
        assert not config.uses_custom_transport

    @pytest.mark.parametrize("value", ["true", "TRUE", "1", 1, True])
    def test_ignore_ssl_true_values(self, value):
        assert ProviderConfig.from_dict({**RECORD, "ignoreSsl": value}).ignore_ssl is True

    @pytest.mark.parametrize("value", ["no", "yes", "off", 2, 1.0, [], {}])
    def test_ignore_ssl_rejects_ambiguous_values(self, value):
        with pytest.raises(ConfigError, match="ignoreSsl"):
            ProviderConfig.from_dict({**RECORD, "ignoreSsl": value})

    def test_ignore_ssl_must_be_bool_on_construction(self):
        config = ProviderConfig.from_dict(RECORD)

        with pytest.raises(ConfigError, match="ignoreSsl"):
            ProviderConfig(
                id=config.id,
                provider_name=config.provider_name,
                base_url=config.base_url,
                api_key=config.api_key,
                model_name=config.model_name,
                ignore_ssl="false",
            )


@pytest.mark.unit
def test_chat_message_to_dict():
    assert ChatMessage(role="user", content="hi").to_dict() == {"role": "user", "content": "hi"}
