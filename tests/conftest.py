from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Iterator

import pytest

from azdocgen.config import ActionConfig
from tests._fixtures.github import FakeGitHub


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., ActionConfig]:
    """Build an ActionConfig rooted at the pytest tmp_path."""

    def factory(**overrides: Any) -> ActionConfig:
        values: dict[str, Any] = {
            "github_token": "gh-token",
            "api_key": "secret-key",
            "endpoint": "https://contoso.openai.azure.com",
            "deployment": "gpt-4o",
            "workspace": tmp_path,
        }
        values.update(overrides)
        return ActionConfig(**values)

    return factory


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture(autouse=True)
def _reset_azdocgen_logger() -> Iterator[None]:
    """Undo configure_logging so caplog sees azdocgen records in every test."""
    logger = logging.getLogger("azdocgen")
    yield
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
