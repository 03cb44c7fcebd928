"""Configuration loading for azdocgen (action inputs and .azdocgen.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

import yaml

from .git.patterns import DEFAULT_PATTERNS

CONFIG_FILENAME = ".azdocgen.yml"

MODES = ("pr", "centralized", "both")

DEFAULT_COMMIT_MESSAGE = "docs: auto-generated Azure integration documentation [skip ci]"


class ConfigError(RuntimeError):
    """Raised when the configuration is invalid or incomplete."""


@dataclass(frozen=True)
class ActionConfig:
    """Run configuration, bound once per invocation."""

    github_token: str
    api_key: str
    endpoint: Optional[str] = None
    deployment: Optional[str] = None
    model: str = "gpt-4o-mini"
    api_version: str = "2024-02-15-preview"
    docs_folder: str = "docs"
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    file_patterns: Tuple[str, ...] = DEFAULT_PATTERNS
    mode: str = "pr"
    central_doc_file: str = "azure-integrations.md"
    include_architecture_diagram: bool = False
    include_security_notes: bool = False
    include_cost_impact: bool = False
    create_pr_comment: bool = False
    auto_update_pr: bool = False
    update_pr_title: bool = False
    skip_if_no_changes: bool = False
    fail_on_error: bool = False
    max_commits_to_analyze: int = 5
    request_timeout: float = 60.0
    workspace: Path = field(default_factory=Path.cwd)

    def __post_init__(self) -> None:
        if self.mode not in MODES:
            raise ConfigError(
                f"Invalid mode: {self.mode}. Must be 'pr', 'centralized', or 'both'"
            )
        if self.max_commits_to_analyze < 1:
            raise ConfigError("max-commits-to-analyze must be a positive integer")

    @property
    def writes_per_pr(self) -> bool:
        return self.mode in {"pr", "both"}

    @property
    def writes_centralized(self) -> bool:
        return self.mode in {"centralized", "both"}

    @property
    def docs_path(self) -> Path:
        return self.workspace / self.docs_folder

    def with_mode(self, mode: str) -> "ActionConfig":
        return replace(self, mode=mode)


# input name -> (field, coercer)
_INPUTS: Dict[str, Tuple[str, str]] = {
    "github-token": ("github_token", "str"),
    "api-key": ("api_key", "str"),
    "azure-openai-key": ("api_key", "str"),
    "openai-api-key": ("api_key", "str"),
    "endpoint": ("endpoint", "str"),
    "azure-openai-endpoint": ("endpoint", "str"),
    "deployment": ("deployment", "str"),
    "azure-openai-deployment": ("deployment", "str"),
    "model": ("model", "str"),
    "api-version": ("api_version", "str"),
    "docs-folder": ("docs_folder", "str"),
    "commit-message": ("commit_message", "str"),
    "file-patterns": ("file_patterns", "patterns"),
    "mode": ("mode", "str"),
    "central-doc-file": ("central_doc_file", "str"),
    "include-architecture-diagram": ("include_architecture_diagram", "bool"),
    "include-security-notes": ("include_security_notes", "bool"),
    "include-cost-impact": ("include_cost_impact", "bool"),
    "create-pr-comment": ("create_pr_comment", "bool"),
    "auto-update-pr": ("auto_update_pr", "bool"),
    "update-pr-title": ("update_pr_title", "bool"),
    "skip-if-no-changes": ("skip_if_no_changes", "bool"),
    "fail-on-error": ("fail_on_error", "bool"),
    "max-commits-to-analyze": ("max_commits_to_analyze", "int"),
    "request-timeout": ("request_timeout", "float"),
}

_FALLBACK_ENV: Dict[str, Sequence[str]] = {
    "github_token": ("GITHUB_TOKEN",),
    "api_key": ("AZURE_OPENAI_API_KEY", "OPENAI_API_KEY"),
    "endpoint": ("AZURE_OPENAI_ENDPOINT", "OPENAI_BASE_URL"),
    "deployment": ("AZURE_OPENAI_DEPLOYMENT",),
}


def load_config(
    workspace: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    config_path: Path | None = None,
) -> ActionConfig:
    """Resolve configuration from defaults, .azdocgen.yml and action inputs."""
    env = os.environ if environ is None else environ
    root = (workspace or Path(env.get("GITHUB_WORKSPACE") or Path.cwd())).expanduser()

    values: Dict[str, Any] = {}
    file_path = config_path or root / CONFIG_FILENAME
    if file_path.exists():
        for key, raw in _read_config(file_path).items():
            _apply(values, str(key).replace("_", "-"), raw, source=file_path.name)

    for name in _INPUTS:
        raw = env.get(_input_env_name(name))
        if raw is None or not raw.strip():
            continue
        _apply(values, name, raw, source=_input_env_name(name))

    for field_name, keys in _FALLBACK_ENV.items():
        if values.get(field_name):
            continue
        for key in keys:
            if env.get(key):
                values[field_name] = env[key]
                break

    if not values.get("github_token"):
        raise ConfigError("Input required and not supplied: github-token")
    if not values.get("api_key"):
        raise ConfigError("Input required and not supplied: api-key")
    if not values.get("file_patterns"):
        values.pop("file_patterns", None)

    return ActionConfig(workspace=root, **values)


def _input_env_name(name: str) -> str:
    return "INPUT_" + name.replace(" ", "_").upper()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _apply(values: Dict[str, Any], name: str, raw: Any, *, source: str) -> None:
    spec = _INPUTS.get(name)
    if spec is None:
        return
    field_name, kind = spec
    if kind == "str":
        value: Any = _as_str(raw)
    elif kind == "bool":
        value = _as_bool(raw)
    elif kind == "int":
        value = _as_int(raw)
    elif kind == "float":
        value = _as_float(raw)
    else:
        value = _as_patterns(raw)
    if value is None:
        raise ConfigError(f"Invalid value for '{name}' in {source}: {raw!r}")
    values[field_name] = value


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return str(value).lower()
    return str(value).strip() if isinstance(value, (str, int, float)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0", ""}:
            return False
    return None


def _as_patterns(value: Any) -> Optional[Tuple[str, ...]]:
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = [str(item) for item in value if isinstance(item, (str, int, float))]
    else:
        return None
    return tuple(item.strip() for item in items if item.strip())


__all__ = ["ActionConfig", "ConfigError", "DEFAULT_COMMIT_MESSAGE", "MODES", "load_config"]
