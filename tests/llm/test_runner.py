"""Tests for the documentation generator."""

from __future__ import annotations

import http.client
import io
import json
import socket
import threading
from urllib.error import HTTPError, URLError

import pytest

from azdocgen.config import ConfigError
from azdocgen.llm import (
    ApiError,
    AuthenticationError,
    BadRequestError,
    DocumentationGenerator,
    EndpointNotFoundError,
    EndpointStrategy,
    MalformedResponseError,
    RateLimitError,
    TransportError,
)
from azdocgen.models import FileDiff, PullRequestMetadata

DIFFS = [FileDiff(filename="infra/apim-policy.xml", status="modified", diff="@@", additions=1, deletions=0)]
METADATA = PullRequestMetadata(title="Policy", number=5, body="", author="dev")


def _ok(content: str = "# Docs") -> bytes:
    return json.dumps({"choices": [{"message": {"content": content}}]}).encode("utf-8")


def _recording(status: int, body: bytes):
    captured = {}

    def transport(request):
        captured["request"] = request
        return status, body

    return transport, captured


def test_azure_endpoint_root_gets_deployment_path(make_config) -> None:
    strategy = EndpointStrategy.resolve(make_config(endpoint="https://contoso.openai.azure.com/"))

    assert strategy.provider == "azure"
    assert strategy.url == (
        "https://contoso.openai.azure.com/openai/deployments/gpt-4o/chat/completions"
        "?api-version=2024-02-15-preview"
    )
    assert strategy.auth_header == "api-key"
    assert strategy.auth_value == "secret-key"
    assert strategy.model is None


def test_azure_full_endpoint_is_used_verbatim(make_config) -> None:
    full = "https://contoso.openai.azure.com/openai/deployments/docs/chat/completions?api-version=2024-06-01"

    strategy = EndpointStrategy.resolve(make_config(endpoint=full, deployment=None))

    assert strategy.url == full


def test_azure_root_without_deployment_is_a_config_error(make_config) -> None:
    with pytest.raises(ConfigError):
        EndpointStrategy.resolve(make_config(deployment=None))


def test_openai_strategy_uses_bearer_token(make_config) -> None:
    strategy = EndpointStrategy.resolve(make_config(endpoint=None, deployment=None, model="gpt-4o-mini"))

    assert strategy.provider == "openai"
    assert strategy.url == "https://api.openai.com/v1/chat/completions"
    assert strategy.auth_header == "Authorization"
    assert strategy.auth_value == "Bearer secret-key"
    assert strategy.model == "gpt-4o-mini"


def test_generate_posts_chat_completion_payload(make_config) -> None:
    transport, captured = _recording(200, _ok("# Generated"))
    generator = DocumentationGenerator(make_config(), transport=transport)

    result = generator.generate(DIFFS, METADATA)

    assert result == "# Generated"
    request = captured["request"]
    assert request.headers["api-key"] == "secret-key"
    assert request.headers["Content-Type"] == "application/json"
    assert request.timeout == 60.0
    assert request.payload["temperature"] == 0.3
    assert request.payload["max_tokens"] == 3000
    assert "model" not in request.payload
    roles = [message["role"] for message in request.payload["messages"]]
    assert roles == ["system", "user"]
    assert "infra/apim-policy.xml" in request.payload["messages"][1]["content"]


def test_generate_returns_text_verbatim(make_config) -> None:
    transport, _ = _recording(200, _ok("  # Title\n\nBody  \n"))

    assert DocumentationGenerator(make_config(), transport=transport).generate(DIFFS, METADATA) == "  # Title\n\nBody  \n"


@pytest.mark.parametrize(
    ("status", "error_type"),
    [
        (401, AuthenticationError),
        (404, EndpointNotFoundError),
        (429, RateLimitError),
        (500, ApiError),
        (503, ApiError),
    ],
)
def test_http_status_classification(make_config, status, error_type) -> None:
    transport, _ = _recording(status, b'{"error": {"message": "nope"}}')

    with pytest.raises(error_type) as excinfo:
        DocumentationGenerator(make_config(), transport=transport).generate(DIFFS, METADATA)

    assert excinfo.value.status == status
    assert excinfo.value.provider_message == "nope"


def test_bad_request_surfaces_provider_message(make_config) -> None:
    transport, _ = _recording(400, b'{"error": {"message": "max_tokens is too large"}}')

    with pytest.raises(BadRequestError) as excinfo:
        DocumentationGenerator(make_config(), transport=transport).generate(DIFFS, METADATA)

    assert "max_tokens is too large" in str(excinfo.value)
    assert excinfo.value.kind == "bad_request"


@pytest.mark.parametrize(
    "body",
    [
        json.dumps({"choices": []}).encode("utf-8"),
        json.dumps({"id": "x"}).encode("utf-8"),
        json.dumps({"choices": [{"message": {"content": ""}}]}).encode("utf-8"),
        json.dumps({"choices": [{"finish_reason": "content_filter"}]}).encode("utf-8"),
        b"not json",
        b"",
    ],
)
def test_malformed_success_responses(make_config, body) -> None:
    transport, _ = _recording(200, body)

    with pytest.raises(MalformedResponseError):
        DocumentationGenerator(make_config(), transport=transport).generate(DIFFS, METADATA)


class FakeResponse:
    status = 200

    def __init__(self, body: bytes) -> None:
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


def test_default_transport_uses_urlopen(monkeypatch, make_config) -> None:
    captured = {}

    def fake_urlopen(request, timeout=None):
        captured["url"] = request.full_url
        captured["headers"] = {k.lower(): v for k, v in request.header_items()}
        captured["payload"] = json.loads(request.data.decode("utf-8"))
        captured["timeout"] = timeout
        return FakeResponse(_ok("from urlopen"))

    monkeypatch.setattr("azdocgen.llm.runner.urlopen", fake_urlopen)
    config = make_config(endpoint="https://api.example.com/v1/", deployment=None, model="gpt-4o")

    result = DocumentationGenerator(config).generate(DIFFS, METADATA)

    assert result == "from urlopen"
    assert captured["url"] == "https://api.example.com/v1/chat/completions"
    assert captured["headers"]["authorization"] == "Bearer secret-key"
    assert captured["payload"]["model"] == "gpt-4o"
    assert captured["timeout"] == 60.0


def test_default_transport_maps_http_errors(monkeypatch, make_config) -> None:
    def fake_urlopen(request, timeout=None):
        raise HTTPError(request.full_url, 401, "Unauthorized", {}, io.BytesIO(b"{}"))

    monkeypatch.setattr("azdocgen.llm.runner.urlopen", fake_urlopen)

    with pytest.raises(AuthenticationError):
        DocumentationGenerator(make_config()).generate(DIFFS, METADATA)


@pytest.mark.parametrize(
    ("raised", "fragment"),
    [
        (URLError(socket.timeout("timed out")), "timed out"),
        (URLError(socket.gaierror(-2, "Name or service not known")), "could not be resolved"),
        (URLError(ConnectionRefusedError(111, "Connection refused")), "Connection refused"),
        (TimeoutError("read timed out"), "timed out"),
        (http.client.RemoteDisconnected("Remote end closed connection without response"), "Remote end closed"),
        (ConnectionResetError(104, "Connection reset by peer"), "Connection reset by peer"),
    ],
)
def test_transport_failures_are_classified_separately(monkeypatch, make_config, raised, fragment) -> None:
    def fake_urlopen(request, timeout=None):
        raise raised

    monkeypatch.setattr("azdocgen.llm.runner.urlopen", fake_urlopen)

    with pytest.raises(TransportError) as excinfo:
        DocumentationGenerator(make_config()).generate(DIFFS, METADATA)

    assert fragment in str(excinfo.value)
    assert excinfo.value.status is None


def test_server_closing_without_reply_is_a_transport_error(make_config) -> None:
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(1)
    port = server.getsockname()[1]

    def _accept_and_close() -> None:
        connection, _ = server.accept()
        with connection:
            connection.recv(65536)

    worker = threading.Thread(target=_accept_and_close, daemon=True)
    worker.start()
    config = make_config(endpoint=f"http://127.0.0.1:{port}/v1", deployment=None, request_timeout=5.0)

    try:
        with pytest.raises(TransportError) as excinfo:
            DocumentationGenerator(config).generate(DIFFS, METADATA)
    finally:
        worker.join(timeout=5)
        server.close()

    assert excinfo.value.kind == "transport"
