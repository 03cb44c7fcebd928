"""Builds the chat prompts sent to the documentation model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Sequence

from ..git.patterns import detect_service_type
from ..models import EventMetadata, FileDiff, PullRequestMetadata, PushMetadata
from .constants import (
    CLOSING_INSTRUCTION,
    COMMIT_ID_PREFIX,
    MAX_DIFF_CHARS,
    OUTLINE_BASE,
    OUTLINE_COST,
    OUTLINE_DIAGRAM,
    OUTLINE_SECURITY,
    OUTLINE_TAIL,
    SYSTEM_CLOSING,
    SYSTEM_COST,
    SYSTEM_DIAGRAM,
    SYSTEM_PROMPT,
    SYSTEM_SECURITY,
)

if TYPE_CHECKING:  # pragma: no cover
    from ..config import ActionConfig


@dataclass(frozen=True)
class PromptMessage:
    """Represents a single chat message for LLM prompting."""

    role: str
    content: str


class PromptBuilder:
    """Renders system and user prompts from diffs, event metadata and flags.

    Output depends only on the arguments: no clock reads and no randomness, so
    identical inputs give byte-identical prompts.
    """

    def __init__(self, *, max_diff_chars: int = MAX_DIFF_CHARS) -> None:
        self.max_diff_chars = max_diff_chars

    def build_messages(
        self,
        diffs: Sequence[FileDiff],
        metadata: EventMetadata,
        config: "ActionConfig",
    ) -> List[PromptMessage]:
        return [
            PromptMessage(role="system", content=self.build_system_prompt(config)),
            PromptMessage(role="user", content=self.build_user_prompt(diffs, metadata, config)),
        ]

    def build_system_prompt(self, config: "ActionConfig") -> str:
        lines = [SYSTEM_PROMPT]
        if config.include_security_notes:
            lines.append(SYSTEM_SECURITY)
        if config.include_cost_impact:
            lines.append(SYSTEM_COST)
        if config.include_architecture_diagram:
            lines.append(SYSTEM_DIAGRAM)
        return "\n".join(lines) + "\n\n" + SYSTEM_CLOSING

    def build_user_prompt(
        self,
        diffs: Sequence[FileDiff],
        metadata: EventMetadata,
        config: "ActionConfig",
    ) -> str:
        parts = [self._header(metadata)]
        parts.append(self._outline(config))
        parts.append("### Changed Files and Diffs:\n\n")
        for diff in diffs:
            parts.append(self._file_block(diff))
        parts.append("---\n\n" + CLOSING_INSTRUCTION)
        return "".join(parts)

    # ------------------------------------------------------------------
    # Sections

    @staticmethod
    def _header(metadata: EventMetadata) -> str:
        if isinstance(metadata, PullRequestMetadata):
            return (
                "# Documentation Request for Pull Request\n\n"
                f"**PR Title:** {metadata.title}\n"
                f"**PR Number:** #{metadata.number}\n"
                f"**Author:** @{metadata.author}\n"
                "**Description:**\n"
                f"{metadata.body or '(No description provided)'}\n\n"
                "---\n"
            )
        if isinstance(metadata, PushMetadata):
            commits = "\n".join(
                f"- {commit.id[:COMMIT_ID_PREFIX]}: {_first_line(commit.message)} ({commit.author_name})"
                for commit in metadata.commits
            )
            return (
                "# Documentation Request for Commit\n\n"
                f"**Branch:** {metadata.branch}\n"
                f"**Title:** {metadata.title}\n"
                f"**Commits Analyzed:** {len(metadata.commits)}\n\n"
                "Recent Commits:\n"
                f"{commits}\n\n"
                "---\n"
            )
        raise TypeError(f"Unsupported metadata type: {type(metadata).__name__}")

    @staticmethod
    def _outline(config: "ActionConfig") -> str:
        items = list(OUTLINE_BASE)
        if config.include_security_notes:
            items.append(OUTLINE_SECURITY)
        if config.include_cost_impact:
            items.append(OUTLINE_COST)
        if config.include_architecture_diagram:
            items.append(OUTLINE_DIAGRAM)
        items.extend(OUTLINE_TAIL)
        return (
            "## Azure Integration Changes\n\n"
            "Generate comprehensive documentation including:\n\n"
            + "\n".join(items)
            + "\n\n"
        )

    def _file_block(self, diff: FileDiff) -> str:
        return (
            f"#### File: `{diff.filename}`\n"
            f"- **Status:** {diff.status}\n"
            f"- **Changes:** +{diff.additions} / -{diff.deletions} lines\n"
            f"- **Type:** {detect_service_type(diff.filename)}\n\n"
            "```diff\n"
            f"{diff.diff[: self.max_diff_chars]}\n"
            "```\n\n"
        )


def _first_line(message: str) -> str:
    stripped = message.strip()
    return stripped.splitlines()[0] if stripped else ""


__all__ = ["PromptBuilder", "PromptMessage"]
