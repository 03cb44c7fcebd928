"""Chat-completion client that turns diffs into Markdown documentation."""

from __future__ import annotations

import http.client
import json
import socket
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

from ..config import ActionConfig, ConfigError
from ..logging import get_logger
from ..models import EventMetadata, FileDiff
from ..prompting.builder import PromptBuilder
from .errors import (
    ApiError,
    AuthenticationError,
    BadRequestError,
    EndpointNotFoundError,
    GenerationError,
    MalformedResponseError,
    RateLimitError,
    TransportError,
)

TEMPERATURE = 0.3
MAX_TOKENS = 3000
DEFAULT_OPENAI_ENDPOINT = "https://api.openai.com/v1"
AZURE_HOST_SUFFIXES = (".openai.azure.com", ".cognitiveservices.azure.com")


@dataclass(frozen=True)
class EndpointStrategy:
    """Resolved URL and auth scheme for one provider."""

    provider: str
    url: str
    auth_header: str
    auth_value: str
    model: Optional[str] = None

    @classmethod
    def resolve(cls, config: ActionConfig) -> "EndpointStrategy":
        endpoint = (config.endpoint or "").strip()
        if endpoint and _is_azure_host(endpoint):
            return cls._azure(config, endpoint)
        return cls._openai(config, endpoint or DEFAULT_OPENAI_ENDPOINT)

    @classmethod
    def _azure(cls, config: ActionConfig, endpoint: str) -> "EndpointStrategy":
        url = endpoint
        if "/openai/deployments/" not in url:
            if not config.deployment:
                raise ConfigError("Azure OpenAI endpoints require a deployment name")
            url = (
                f"{url.rstrip('/')}/openai/deployments/{config.deployment}"
                f"/chat/completions?api-version={config.api_version}"
            )
        return cls(provider="azure", url=url, auth_header="api-key", auth_value=config.api_key)

    @classmethod
    def _openai(cls, config: ActionConfig, endpoint: str) -> "EndpointStrategy":
        url = endpoint.rstrip("/")
        if not url.endswith("/chat/completions"):
            url = f"{url}/chat/completions"
        return cls(
            provider="openai",
            url=url,
            auth_header="Authorization",
            auth_value=f"Bearer {config.api_key}",
            model=config.deployment or config.model,
        )

    @property
    def display_url(self) -> str:
        return self.url.split("?", 1)[0]


@dataclass
class LLMRequest:
    """A single chat-completion call."""

    url: str
    headers: Dict[str, str]
    payload: Dict[str, object]
    timeout: float


class DocumentationGenerator:
    """Calls the configured chat-completion endpoint once per run, without retries."""

    def __init__(
        self,
        config: ActionConfig,
        *,
        prompt_builder: PromptBuilder | None = None,
        transport: Callable[[LLMRequest], Tuple[int, bytes]] | None = None,
    ) -> None:
        self.config = config
        self.strategy = EndpointStrategy.resolve(config)
        self.prompt_builder = prompt_builder or PromptBuilder()
        self._transport = transport or _urllib_transport
        self.logger = get_logger("llm")

    def generate(self, diffs: Sequence[FileDiff], metadata: EventMetadata) -> str:
        """Return the generated Markdown or raise a GenerationError subclass."""
        messages = self.prompt_builder.build_messages(diffs, metadata, self.config)
        payload: Dict[str, object] = {
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
        }
        if self.strategy.model:
            payload["model"] = self.strategy.model

        request = LLMRequest(
            url=self.strategy.url,
            headers={
                "Content-Type": "application/json",
                self.strategy.auth_header: self.strategy.auth_value,
            },
            payload=payload,
            timeout=self.config.request_timeout,
        )
        self.logger.info("Calling %s chat completion: %s", self.strategy.provider, self.strategy.display_url)
        status, raw = self._transport(request)
        self.logger.debug("Response status: %s", status)

        body = _decode(raw)
        if status < 200 or status >= 300:
            raise self._classify(status, body)
        if not isinstance(body, dict):
            raise MalformedResponseError(
                "Chat completion returned a non-JSON or empty body", status=status
            )

        content = self._extract_content(body)
        self.logger.info("Generated %d characters of documentation", len(content))
        usage = body.get("usage")
        if isinstance(usage, dict):
            self.logger.info(
                "Token usage: %s prompt + %s completion = %s total",
                usage.get("prompt_tokens"),
                usage.get("completion_tokens"),
                usage.get("total_tokens"),
            )
        return content

    def _classify(self, status: int, body: object) -> GenerationError:
        provider_message = _provider_message(body)
        self.logger.error("Chat completion API error %s: %s", status, provider_message or body)
        if status == 401:
            return AuthenticationError(
                "Authentication failed. Check the API key configured for the action.",
                status=status,
                provider_message=provider_message,
            )
        if status == 404:
            return EndpointNotFoundError(
                "Endpoint or deployment not found. Verify the endpoint URL and deployment name "
                f"(requested {self.strategy.display_url}).",
                status=status,
                provider_message=provider_message,
            )
        if status == 429:
            return RateLimitError(
                "Rate limit exceeded. Check the quota for the model deployment.",
                status=status,
                provider_message=provider_message,
            )
        if status == 400:
            return BadRequestError(
                f"Bad request: {provider_message or 'Bad request'}",
                status=status,
                provider_message=provider_message,
            )
        return ApiError(
            f"Chat completion request failed with status {status}: {provider_message or json.dumps(body)}",
            status=status,
            provider_message=provider_message,
        )

    @staticmethod
    def _extract_content(payload: Dict[str, object]) -> str:
        choices = payload.get("choices")
        if not isinstance(choices, list):
            raise MalformedResponseError(
                'Response missing "choices" array. Check the endpoint URL format and API version.'
            )
        if not choices:
            raise MalformedResponseError(
                "Response returned an empty choices array. The content may have been filtered."
            )
        first = choices[0]
        message = first.get("message") if isinstance(first, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str) or not content:
            raise MalformedResponseError(
                "Response missing message content. It may have been filtered or is incomplete."
            )
        return content


def _urllib_transport(request: LLMRequest) -> Tuple[int, bytes]:
    data = json.dumps(request.payload).encode("utf-8")
    http_request = Request(request.url, data=data, headers=request.headers, method="POST")
    try:
        with urlopen(http_request, timeout=request.timeout) as response:  # type: ignore[arg-type]
            return response.status, response.read()
    except HTTPError as exc:
        return exc.code, exc.read() if hasattr(exc, "read") else b""
    except URLError as exc:
        raise _transport_error(exc.reason, request.timeout) from exc
    except (TimeoutError, socket.timeout) as exc:
        raise _transport_error(exc, request.timeout) from exc
    except (OSError, http.client.HTTPException) as exc:
        raise _transport_error(exc, request.timeout) from exc


def _transport_error(reason: object, timeout: float) -> TransportError:
    if isinstance(reason, (TimeoutError, socket.timeout)):
        return TransportError(f"Request timed out after {timeout:g} seconds")
    if isinstance(reason, socket.gaierror):
        return TransportError(f"Endpoint host could not be resolved: {reason}")
    if isinstance(reason, ConnectionRefusedError):
        return TransportError("Connection refused by the endpoint. Check the network and endpoint URL.")
    return TransportError(f"Request failed: {reason}")


def _decode(raw: bytes) -> object:
    if not raw:
        return None
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return raw.decode("utf-8", errors="replace")


def _provider_message(body: object) -> Optional[str]:
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        if isinstance(body.get("message"), str):
            return body["message"]
    return None


def _is_azure_host(endpoint: str) -> bool:
    host = (urlparse(endpoint).hostname or "").lower()
    return any(host.endswith(suffix) for suffix in AZURE_HOST_SUFFIXES)


__all__ = ["DocumentationGenerator", "EndpointStrategy", "LLMRequest"]
