"""Failure taxonomy for documentation generation."""

from __future__ import annotations

from typing import Optional


class GenerationError(RuntimeError):
    """Base class for chat-completion failures."""

    kind = "generation"

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        provider_message: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.provider_message = provider_message


class AuthenticationError(GenerationError):
    kind = "auth"


class EndpointNotFoundError(GenerationError):
    kind = "not_found"


class RateLimitError(GenerationError):
    kind = "rate_limited"


class BadRequestError(GenerationError):
    kind = "bad_request"


class ApiError(GenerationError):
    kind = "api"


class TransportError(GenerationError):
    """Timeout, DNS or connection failure before any HTTP status was received."""

    kind = "transport"


class MalformedResponseError(GenerationError):
    kind = "malformed"


__all__ = [
    "ApiError",
    "AuthenticationError",
    "BadRequestError",
    "EndpointNotFoundError",
    "GenerationError",
    "MalformedResponseError",
    "RateLimitError",
    "TransportError",
]
