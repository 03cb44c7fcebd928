"""FastAPI application entrypoint for azdocgen service mode."""

from __future__ import annotations

import asyncio
import os
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import ConfigError, load_config
from ..events import EventError, parse_event
from ..git.github import GitHubClient
from ..orchestrator import Orchestrator
from ..outputs import ActionOutputs

OrchestratorFactory = Callable[[str], Orchestrator]


class EventRequest(BaseModel):
    repository: str
    event_name: str
    payload: Dict[str, Any] = Field(default_factory=dict)
    ref: str = ""
    sha: Optional[str] = None


class EventResponse(BaseModel):
    outputs: Dict[str, str]


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator(repository: str) -> Orchestrator:
    config = load_config()
    client = GitHubClient(
        config.github_token, repository, api_url=os.environ.get("GITHUB_API_URL")
    )
    return Orchestrator(config, client)


def create_app(
    orchestrator_factory: OrchestratorFactory = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application that accepts forwarded GitHub events."""

    app = FastAPI(title="Azure Integration Doc Agent", version="1.0.0")

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/events", response_model=EventResponse)
    async def handle_event(payload: EventRequest) -> EventResponse:
        event = parse_event(
            payload.event_name, payload.payload, ref=payload.ref, sha=payload.sha
        )
        # Build per request so configuration changes apply without a restart.
        orchestrator = orchestrator_factory(payload.repository)

        def _run() -> ActionOutputs:
            return orchestrator.run(event)

        loop = asyncio.get_running_loop()
        outputs = await loop.run_in_executor(None, _run)
        return EventResponse(outputs=outputs.as_dict())

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(EventError)
    async def event_error_handler(_: Any, exc: EventError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(
        _: Any, exc: RuntimeError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "0.0.0.0", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)


__all__ = ["create_app", "run_service"]
