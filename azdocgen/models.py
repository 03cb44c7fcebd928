"""Core data models shared across azdocgen components."""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple, Union

FILE_STATUSES = ("added", "modified", "removed", "renamed")


@dataclass(frozen=True)
class ChangedFile:
    """A file record as reported by the GitHub files/compare APIs."""

    path: str
    status: str
    additions: int = 0
    deletions: int = 0
    patch: Optional[str] = None

    @classmethod
    def from_api(cls, record: Mapping[str, Any]) -> "ChangedFile":
        path = record.get("filename") or record.get("path") or ""
        return cls(
            path=str(path),
            status=str(record.get("status") or "modified"),
            additions=_count(record.get("additions")),
            deletions=_count(record.get("deletions")),
            patch=record.get("patch") if isinstance(record.get("patch"), str) else None,
        )


@dataclass(frozen=True)
class FileDiff:
    """Normalized per-file change handed to the prompt builder."""

    filename: str
    status: str
    diff: str
    additions: int
    deletions: int


@dataclass(frozen=True)
class CommitInfo:
    """A commit from a push payload."""

    id: str
    message: str
    author_name: str

    @classmethod
    def from_payload(cls, record: Mapping[str, Any]) -> "CommitInfo":
        author = record.get("author") or {}
        name = author.get("name") if isinstance(author, Mapping) else None
        return cls(
            id=str(record.get("id") or ""),
            message=str(record.get("message") or ""),
            author_name=str(name or "unknown"),
        )


@dataclass(frozen=True)
class PullRequestMetadata:
    """Pull request context used to frame the documentation request."""

    title: str
    number: int
    body: str
    author: str


@dataclass(frozen=True)
class PushMetadata:
    """Push context used to frame the documentation request."""

    branch: str
    title: str
    commits: Tuple[CommitInfo, ...] = field(default_factory=tuple)


EventMetadata = Union[PullRequestMetadata, PushMetadata]


def _count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    return 0
