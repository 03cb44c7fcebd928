"""PR comment rendering and the hidden marker used to find it again."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence

from .render import render

COMMENT_MARKER = "<!-- azure-integration-doc-agent -->"
PREVIEW_CHARS = 500
TITLE_TAG = "[docs updated]"


@dataclass(frozen=True)
class CommentSummary:
    """What a run produced, as shown in the PR comment."""

    files_processed: int
    doc_paths: Sequence[str]
    documentation: str
    is_update: bool = False


def render_comment(
    summary: CommentSummary,
    *,
    managed: bool,
    timestamp: Optional[str] = None,
) -> str:
    """Render the comment body.

    ``managed`` comments carry the hidden marker and a timestamp so a later run
    can find and refresh them in place.
    """
    if managed:
        badge = "🔄 **Updated**" if summary.is_update else "✨ **New**"
        trigger = "Updated on new commits" if summary.is_update else "Created on PR"
        footer = f"Auto-generated by Azure Integration Doc Agent 🤖 | {trigger}"
    else:
        badge = "Generated"
        footer = "Generated by Azure Integration Doc Agent 🤖"
    return render(
        "pr_comment.md.j2",
        marker=COMMENT_MARKER if managed else "",
        badge=badge,
        files_processed=summary.files_processed,
        doc_paths=list(summary.doc_paths),
        timestamp=timestamp if managed else None,
        preview=summary.documentation[:PREVIEW_CHARS] + "...",
        documentation=summary.documentation,
        footer=footer,
    )


def find_marked_comment(comments: Iterable[Mapping[str, object]]) -> Optional[Mapping[str, object]]:
    for comment in comments:
        body = comment.get("body")
        if isinstance(body, str) and COMMENT_MARKER in body:
            return comment
    return None


def tagged_title(title: str) -> Optional[str]:
    """Return the title with the docs tag appended, or None when already tagged."""
    if TITLE_TAG in title:
        return None
    return f"{title} {TITLE_TAG}"


__all__ = [
    "COMMENT_MARKER",
    "CommentSummary",
    "PREVIEW_CHARS",
    "TITLE_TAG",
    "find_marked_comment",
    "render_comment",
    "tagged_title",
]
