"""Tests for step output reporting."""

from __future__ import annotations

import logging

from azdocgen.outputs import ActionOutputs, write_outputs


def test_empty_outputs_as_dict() -> None:
    assert ActionOutputs.empty().as_dict() == {
        "docs-updated": "false",
        "files-processed": "0",
        "documentation-path": "",
        "changes-summary": "",
        "pr-comment-created": "false",
    }


def test_write_outputs_appends_to_file(tmp_path) -> None:
    output_file = tmp_path / "github_output"
    output_file.write_text("previous=1\n", encoding="utf-8")
    outputs = ActionOutputs(
        docs_updated=True,
        files_processed=2,
        documentation_path="docs/pr-1-azure-integrations.md",
        changes_summary="2 Azure files modified in PR #1",
        pr_comment_created=True,
    )

    write_outputs(outputs, output_file)

    assert output_file.read_text(encoding="utf-8").splitlines() == [
        "previous=1",
        "docs-updated=true",
        "files-processed=2",
        "documentation-path=docs/pr-1-azure-integrations.md",
        "changes-summary=2 Azure files modified in PR #1",
        "pr-comment-created=true",
    ]


def test_multiline_values_use_delimiter_syntax(tmp_path) -> None:
    output_file = tmp_path / "github_output"

    write_outputs(ActionOutputs(changes_summary="line one\nline two"), output_file)

    lines = output_file.read_text(encoding="utf-8").splitlines()
    start = next(i for i, line in enumerate(lines) if line.startswith("changes-summary<<"))
    delimiter = lines[start].split("<<", 1)[1]
    assert lines[start + 1 : start + 4] == ["line one", "line two", delimiter]


def test_outputs_are_logged_without_output_file(caplog) -> None:
    with caplog.at_level(logging.INFO, logger="azdocgen.outputs"):
        write_outputs(ActionOutputs(files_processed=3), None)

    assert "output files-processed=3" in caplog.text
