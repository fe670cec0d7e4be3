"""CLI commands run through typer's CliRunner against a temporary CHATDESK_HOME."""

import httpx
import pytest
from typer.testing import CliRunner

from chatdesk.cli.context import open_store
from chatdesk.cli.main import app
from tests.fixtures.mock_http import sse_response

runner = CliRunner()

ADD_ARGS = [
    "config",
    "add",
    "--id",
    "cfg-1",
    "--name",
    "OpenAI",
    "--url",
    "https://api.openai.com/v1/chat/completions",
    "--key",
    "sk-test-1234567890abcd",
    "--model",
    "gpt-4",
]


@pytest.fixture
def added():
    result = runner.invoke(app, [*ADD_ARGS, "--use"])
    assert result.exit_code == 0, result.output
    return "cfg-1"


@pytest.mark.unit
class TestConfigCommands:
    def test_add_stores_configuration(self):
        result = runner.invoke(
            app,
            [*ADD_ARGS, "--param", "temperature=0.5", "--param", "user=bob", "--header", "X-Org=acme"],
        )

        assert result.exit_code == 0, result.output
        assert "Saved configuration" in result.output
        config = open_store().get_config("cfg-1")
        assert config.custom_params == {"temperature": 0.5, "user": "bob"}
        assert config.custom_headers == {"X-Org": "acme"}

    def test_add_rejects_bad_assignment(self):
        result = runner.invoke(app, [*ADD_ARGS, "--param", "novalue"])

        assert result.exit_code != 0
        assert open_store().get_configs() == []

    def test_add_rejects_invalid_context_window(self):
        result = runner.invoke(app, [*ADD_ARGS, "--context-window", "0"])

        assert result.exit_code == 1
        assert "contextWindow" in result.output

    def test_list(self, added):
        result = runner.invoke(app, ["config", "list"])

        assert result.exit_code == 0
        assert "cfg-1" in result.output
        assert "sk-test-1234567890abcd" not in result.output

    def test_list_empty(self):
        result = runner.invoke(app, ["config", "list"])

        assert "No configurations stored" in result.output

    def test_show(self, added):
        result = runner.invoke(app, ["config", "show", added])

        assert result.exit_code == 0
        assert "gpt-4" in result.output
        assert "(active)" in result.output

    def test_show_unknown(self):
        result = runner.invoke(app, ["config", "show", "nope"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_active_and_use(self, added):
        runner.invoke(app, [*ADD_ARGS[:3], "cfg-2", *ADD_ARGS[4:]])

        assert runner.invoke(app, ["config", "use", "cfg-2"]).exit_code == 0
        result = runner.invoke(app, ["config", "active"])

        assert result.output.strip() == "cfg-2"

    def test_use_unknown(self):
        result = runner.invoke(app, ["config", "use", "nope"])

        assert result.exit_code == 1
        assert open_store().get_active_config_id() is None

    def test_remove_active_clears_pointer(self, added):
        result = runner.invoke(app, ["config", "remove", added])

        assert result.exit_code == 0
        assert open_store().get_configs() == []
        assert runner.invoke(app, ["config", "active"]).exit_code == 1


@pytest.mark.unit
class TestChatCommands:
    def test_send_buffered(self, added, mock_openai_api, openai_chat_completion):
        mock_openai_api.post("/v1/chat/completions").mock(
            return_value=httpx.Response(200, json=openai_chat_completion)
        )

        result = runner.invoke(app, ["chat", "send", "Hello", "--no-stream"])

        assert result.exit_code == 0, result.output
        assert "How can I help you today?" in result.output

    def test_send_streaming(self, added, mock_openai_api, openai_streaming_chunks):
        mock_openai_api.post("/v1/chat/completions").mock(
            return_value=sse_response(openai_streaming_chunks)
        )

        result = runner.invoke(app, ["chat", "send", "Hello", "--config", added])

        assert result.exit_code == 0, result.output
        assert "Hello!" in result.output

    def test_send_failure_exits_nonzero(self, added, mock_openai_api):
        mock_openai_api.post("/v1/chat/completions").mock(return_value=httpx.Response(401))

        result = runner.invoke(app, ["chat", "send", "Hello", "--no-stream"])

        assert result.exit_code == 1
        assert "API key" in result.output

    def test_send_without_active_config(self):
        result = runner.invoke(app, ["chat", "send", "Hello"])

        assert result.exit_code == 1
        assert "No active configuration" in result.output


@pytest.mark.unit
class TestTestCommands:
    def test_connection(self, added, mock_openai_api, openai_chat_completion):
        mock_openai_api.post("/v1/chat/completions").mock(
            return_value=httpx.Response(200, json=openai_chat_completion)
        )

        result = runner.invoke(app, ["test", "connection"])

        assert result.exit_code == 0, result.output
        assert "Connection successful" in result.output

    def test_connection_refused(self, added, mock_openai_api):
        mock_openai_api.post("/v1/chat/completions").mock(
            side_effect=httpx.ConnectError("[Errno 111] Connection refused")
        )

        result = runner.invoke(app, ["test", "connection"])

        assert result.exit_code == 1
        assert "Connection refused" in result.output

    def test_models(self, added, mock_openai_api, openai_models_list):
        mock_openai_api.get("/v1/models").mock(return_value=httpx.Response(200, json=openai_models_list))

        result = runner.invoke(app, ["test", "models", "--config", added])

        assert result.exit_code == 0, result.output
        assert "gpt-4o-mini" in result.output


@pytest.mark.unit
def test_version():
    from chatdesk import __version__

    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output
