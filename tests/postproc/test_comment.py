"""Tests for PR comment rendering."""

from __future__ import annotations

from azdocgen.postproc.comment import (
    COMMENT_MARKER,
    PREVIEW_CHARS,
    CommentSummary,
    find_marked_comment,
    render_comment,
    tagged_title,
)

DOCUMENTATION = "# Executive Summary\n\n" + "details " * 200


def _summary(is_update: bool = False) -> CommentSummary:
    return CommentSummary(
        files_processed=2,
        doc_paths=["docs/pr-9-azure-integrations.md", "docs/azure-integrations.md"],
        documentation=DOCUMENTATION,
        is_update=is_update,
    )


def test_managed_comment_for_new_pr() -> None:
    body = render_comment(_summary(), managed=True, timestamp="2024-05-01T12:00:00.000Z")

    assert body.startswith(COMMENT_MARKER + "\n## 📚 Azure Integration Documentation ✨ **New**\n")
    assert "✅ **Files Processed:** 2\n" in body
    assert "📄 **Documentation:** `docs/pr-9-azure-integrations.md`, `docs/azure-integrations.md`\n" in body
    assert "⏰ **Last Updated:** 2024-05-01T12:00:00.000Z\n" in body
    assert body.rstrip().endswith("*Auto-generated by Azure Integration Doc Agent 🤖 | Created on PR*")


def test_managed_comment_for_update() -> None:
    body = render_comment(_summary(is_update=True), managed=True, timestamp="t")

    assert "🔄 **Updated**" in body
    assert "Updated on new commits" in body


def test_preview_is_truncated_and_full_text_is_folded() -> None:
    body = render_comment(_summary(), managed=True, timestamp="t")

    assert "### Preview\n\n" + DOCUMENTATION[:PREVIEW_CHARS] + "...\n" in body
    details = body.index("<summary>View Full Documentation</summary>")
    assert DOCUMENTATION in body[details:]


def test_unmanaged_comment_has_no_marker_or_timestamp() -> None:
    body = render_comment(_summary(), managed=False, timestamp="ignored")

    assert COMMENT_MARKER not in body
    assert body.startswith("## 📚 Azure Integration Documentation Generated\n")
    assert "Last Updated" not in body
    assert "*Generated by Azure Integration Doc Agent 🤖*" in body


def test_find_marked_comment() -> None:
    comments = [
        {"id": 1, "body": "LGTM"},
        {"id": 2, "body": None},
        {"id": 3, "body": f"{COMMENT_MARKER}\nold docs"},
        {"id": 4, "body": f"{COMMENT_MARKER}\nnewer docs"},
    ]

    assert find_marked_comment(comments) == comments[2]
    assert find_marked_comment(comments[:2]) is None


def test_tagged_title() -> None:
    assert tagged_title("Add topic") == "Add topic [docs updated]"
    assert tagged_title("Add topic [docs updated]") is None
