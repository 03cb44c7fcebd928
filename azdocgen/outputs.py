"""Step outputs reported back to the Actions runner."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

from .logging import get_logger


@dataclass(frozen=True)
class ActionOutputs:
    docs_updated: bool = False
    files_processed: int = 0
    documentation_path: str = ""
    changes_summary: str = ""
    pr_comment_created: bool = False

    @classmethod
    def empty(cls) -> "ActionOutputs":
        return cls()

    def as_dict(self) -> Dict[str, str]:
        return {
            "docs-updated": _flag(self.docs_updated),
            "files-processed": str(self.files_processed),
            "documentation-path": self.documentation_path,
            "changes-summary": self.changes_summary,
            "pr-comment-created": _flag(self.pr_comment_created),
        }


def write_outputs(outputs: ActionOutputs, output_file: Path | None) -> None:
    """Append outputs to the GITHUB_OUTPUT file, or log them outside Actions."""
    values = outputs.as_dict()
    if output_file is None:
        logger = get_logger("outputs")
        for key, value in values.items():
            logger.info("output %s=%s", key, value)
        return

    lines = []
    for key, value in values.items():
        if "\n" in value:
            delimiter = f"azdocgen_{uuid.uuid4().hex}"
            lines.append(f"{key}<<{delimiter}\n{value}\n{delimiter}")
        else:
            lines.append(f"{key}={value}")
    with output_file.open("a", encoding="utf-8") as handle:
        handle.write("\n".join(lines) + "\n")


def _flag(value: bool) -> str:
    return "true" if value else "false"


__all__ = ["ActionOutputs", "write_outputs"]
