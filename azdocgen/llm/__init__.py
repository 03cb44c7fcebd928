"""Chat-completion adapters for documentation generation."""

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
from .runner import DocumentationGenerator, EndpointStrategy, LLMRequest

__all__ = [
    "ApiError",
    "AuthenticationError",
    "BadRequestError",
    "DocumentationGenerator",
    "EndpointNotFoundError",
    "EndpointStrategy",
    "GenerationError",
    "LLMRequest",
    "MalformedResponseError",
    "RateLimitError",
    "TransportError",
]
