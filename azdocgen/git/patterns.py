"""Glob matching and service classification for Azure integration files."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, List, Mapping, Pattern, Sequence, Tuple, TypeVar, Union

DEFAULT_PATTERNS: Tuple[str, ...] = (
    "**/*.logicapp.json",
    "**/apim-policy.xml",
    "**/apim-*.xml",
    "**/servicebus-*.json",
    "**/eventhub-*.json",
    "**/function.json",
    "**/bicep/*.bicep",
    "**/terraform/*.tf",
    "**/*azure*.yaml",
    "**/*azure*.yml",
)

# Checked in order; the first hit wins.
_SERVICE_RULES: Sequence[Tuple[str, Tuple[str, ...], str]] = (
    ("contains", ("logicapp",), "Azure Logic App"),
    ("contains", ("apim", "policy"), "API Management"),
    ("contains", ("servicebus",), "Service Bus"),
    ("contains", ("eventhub",), "Event Hub"),
    ("contains", ("function",), "Azure Function"),
    ("suffix", (".bicep",), "Bicep IaC"),
    ("suffix", (".tf",), "Terraform IaC"),
    ("contains", ("azure",), "Azure Configuration"),
)

FALLBACK_SERVICE_TYPE = "Azure Integration"

T = TypeVar("T")


def matches(path: str, patterns: Iterable[str]) -> bool:
    """Return True when any glob pattern matches the repository path."""
    normalized = _normalize(path)
    return any(_compile(pattern).match(normalized) for pattern in patterns if pattern)


def filter_paths(
    records: Iterable[T], patterns: Sequence[str], *, key: str = "path"
) -> List[T]:
    """Keep records (objects or mappings) whose path matches, preserving order."""
    kept: List[T] = []
    for record in records:
        if matches(_record_path(record, key), patterns):
            kept.append(record)
    return kept


def detect_service_type(filename: str) -> str:
    """Classify a filename into the Azure service it configures."""
    for kind, needles, label in _SERVICE_RULES:
        if kind == "suffix":
            if any(filename.endswith(needle) for needle in needles):
                return label
        elif any(needle in filename for needle in needles):
            return label
    return FALLBACK_SERVICE_TYPE


def _record_path(record: Union[Mapping[str, object], object], key: str) -> str:
    if isinstance(record, Mapping):
        value = record.get("filename") or record.get(key) or ""
        return str(value)
    return str(getattr(record, key, "") or "")


def _normalize(path: str) -> str:
    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


@lru_cache(maxsize=256)
def _compile(pattern: str) -> Pattern[str]:
    return re.compile(_translate(_normalize(pattern)) + r"\Z")


def _translate(pattern: str) -> str:
    # Wildcards never match a leading "." in a path segment, so dot-files and
    # dot-directories such as .github/ are only matched by literal patterns.
    parts: List[str] = []
    index = 0
    length = len(pattern)
    while index < length:
        char = pattern[index]
        at_segment_start = index == 0 or pattern[index - 1] == "/"
        if char == "*":
            if pattern.startswith("**", index) and at_segment_start:
                after = index + 2
                if after < length and pattern[after] == "/":
                    # "**/" spans zero or more whole directories
                    parts.append(r"(?:(?!\.)[^/]*/)*")
                    index = after + 1
                    continue
                if after == length:
                    parts.append(r"(?:(?!\.)[^/]*(?:/(?!\.)[^/]*)*)?")
                    index = after
                    continue
            while index + 1 < length and pattern[index + 1] == "*":
                index += 1
            parts.append(r"(?!\.)[^/]*" if at_segment_start else r"[^/]*")
        elif char == "?":
            parts.append(r"[^/.]" if at_segment_start else r"[^/]")
        elif char == "[":
            closing = pattern.find("]", index + 1)
            if closing == -1:
                parts.append(re.escape(char))
            else:
                body = pattern[index + 1 : closing]
                if body.startswith("!"):
                    body = "^" + body[1:]
                parts.append(f"[{body.replace(chr(92), chr(92) * 2)}]")
                index = closing + 1
                continue
        else:
            parts.append(re.escape(char))
        index += 1
    return "".join(parts)


__all__ = [
    "DEFAULT_PATTERNS",
    "FALLBACK_SERVICE_TYPE",
    "detect_service_type",
    "filter_paths",
    "matches",
]
