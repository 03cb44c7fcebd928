"""Typed views of the GitHub event that triggered a run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple, Union

from .models import CommitInfo

ZERO_SHA = "0" * 40


@dataclass(frozen=True)
class PullRequestEvent:
    number: int
    title: str
    body: str
    author: str
    head_branch: str
    action: Optional[str] = None


@dataclass(frozen=True)
class PushEvent:
    ref: str
    before: str
    after: str
    commits: Tuple[CommitInfo, ...] = field(default_factory=tuple)

    @property
    def branch(self) -> str:
        return branch_from_ref(self.ref)


@dataclass(frozen=True)
class ScheduledEvent:
    ref: str
    sha: Optional[str] = None

    @property
    def branch(self) -> str:
        return branch_from_ref(self.ref) or "main"


@dataclass(frozen=True)
class UnsupportedEvent:
    name: str


Event = Union[PullRequestEvent, PushEvent, ScheduledEvent, UnsupportedEvent]


class EventError(ValueError):
    """Raised when an event payload lacks the fields its kind requires."""


def parse_event(
    event_name: str,
    payload: Mapping[str, Any],
    *,
    ref: str = "",
    sha: Optional[str] = None,
) -> Event:
    """Map a GitHub event name and payload onto one of the Event variants."""
    if event_name in {"pull_request", "pull_request_target"}:
        pull = payload.get("pull_request")
        if not isinstance(pull, Mapping):
            raise EventError("Pull request data not found in payload")
        user = pull.get("user") or {}
        head = pull.get("head") or {}
        return PullRequestEvent(
            number=int(pull.get("number") or 0),
            title=str(pull.get("title") or ""),
            body=str(pull.get("body") or ""),
            author=str(user.get("login") or "unknown"),
            head_branch=str(head.get("ref") or ""),
            action=payload.get("action"),
        )
    if event_name == "push":
        before = payload.get("before")
        after = payload.get("after")
        if not before or not after:
            raise EventError("Push payload must include 'before' and 'after' SHAs")
        commits = tuple(
            CommitInfo.from_payload(item)
            for item in payload.get("commits") or []
            if isinstance(item, Mapping)
        )
        return PushEvent(
            ref=str(payload.get("ref") or ref),
            before=str(before),
            after=str(after),
            commits=commits,
        )
    if event_name in {"schedule", "workflow_dispatch"}:
        return ScheduledEvent(ref=str(payload.get("ref") or ref), sha=sha)
    return UnsupportedEvent(name=event_name)


def branch_from_ref(ref: str) -> str:
    prefix = "refs/heads/"
    return ref[len(prefix):] if ref.startswith(prefix) else ref


__all__ = [
    "Event",
    "EventError",
    "PullRequestEvent",
    "PushEvent",
    "ScheduledEvent",
    "UnsupportedEvent",
    "ZERO_SHA",
    "branch_from_ref",
    "parse_event",
]
