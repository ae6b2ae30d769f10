import httpx
import pytest
from typer.testing import CliRunner

from httpsocket_client import cli
from httpsocket_client.client import HttpSocketClient

from tests.conftest import VALID_ID, connection_xml


runner = CliRunner()


@pytest.fixture
def mock_transport(monkeypatch):
    """Route every HttpSocketClient built by the CLI through a MockTransport."""
    responses = {}

    def handler(request):
        status, body = responses["next"]
        return httpx.Response(status, content=body)

    class MockedClient(HttpSocketClient):
        def __init__(self, settings=None, transport=None):
            super().__init__(settings, transport=httpx.MockTransport(handler))

    monkeypatch.setattr(cli, "HttpSocketClient", MockedClient)
    return responses


def test_connect_prints_socket(mock_transport):
    mock_transport["next"] = (200, connection_xml())

    result = runner.invoke(cli.app, ["connect", "http://test/connect"])

    assert result.exit_code == 0, result.output
    assert VALID_ID in result.output
    assert "http://test/connect" in result.output


def test_connect_failure_exits_nonzero(mock_transport):
    mock_transport["next"] = (503, b"")

    result = runner.invoke(cli.app, ["connect", "http://test/connect"])

    assert result.exit_code == 1
    assert "TRANSPORT" in result.output
    assert "503" in result.output


def test_connect_protocol_fault(mock_transport):
    mock_transport["next"] = (200, b"<error/>")

    result = runner.invoke(cli.app, ["connect", "http://test/connect"])

    assert result.exit_code == 1
    assert "PROTOCOL" in result.output


def test_settings_command_reads_yaml(tmp_path, monkeypatch):
    monkeypatch.delenv("HTTPSOCKET_CONNECT_TIMEOUT", raising=False)
    path = tmp_path / "httpsocket.yaml"
    path.write_text("client:\n  connect_timeout: 7.5\n")

    result = runner.invoke(cli.app, ["settings", "--config", str(path)])

    assert result.exit_code == 0, result.output
    assert "connect_timeout" in result.output
    assert "7.5" in result.output
