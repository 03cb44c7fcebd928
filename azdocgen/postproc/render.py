"""Jinja2 environment for the Markdown templates shipped with azdocgen."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def _code(value: object) -> str:
    return f"`{value}`"


@lru_cache(maxsize=None)
def get_environment(templates_dir: Path = TEMPLATES_DIR) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    env.filters["code"] = _code
    return env


def render(template_name: str, **context: object) -> str:
    return get_environment().get_template(template_name).render(**context)


__all__ = ["TEMPLATES_DIR", "get_environment", "render"]
