"""Persist generated documentation under the docs folder."""

from __future__ import annotations

import os
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import Callable, List, Optional

from .config import ActionConfig
from .logging import get_logger

AUDIT_FILENAME = "azure-integration-audit.md"


def _utc_now() -> datetime:
    return datetime.now(UTC)


class DocumentationWriter:
    """Writes per-PR and centralized documentation files according to the mode.

    The centralized file is an append-only log: every run adds a separator, a
    timestamp marker and the new body. Nothing trims or rotates it.
    """

    SEPARATOR = "\n\n---\n\n"

    def __init__(
        self,
        config: ActionConfig,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        self._clock = clock or _utc_now
        self.logger = get_logger("writer")

    def per_pr_path(self, pr_number: int) -> Path:
        return self.config.docs_path / f"pr-{pr_number}-azure-integrations.md"

    @property
    def central_path(self) -> Path:
        return self.config.docs_path / self.config.central_doc_file

    @property
    def audit_path(self) -> Path:
        return self.config.docs_path / AUDIT_FILENAME

    def write(self, documentation: str, pr_number: Optional[int] = None) -> List[Path]:
        """Write the documentation and return the paths touched, per-PR first."""
        paths: List[Path] = []

        if self.config.writes_per_pr and pr_number:
            target = self.per_pr_path(pr_number)
            _atomic_write(target, documentation)
            self.logger.info("Per-PR documentation: %s", self._display(target))
            paths.append(target)

        if self.config.writes_centralized:
            target = self.central_path
            existing = target.read_text(encoding="utf-8") if target.exists() else ""
            if existing:
                stamp = self._clock().isoformat(timespec="milliseconds").replace("+00:00", "Z")
                content = f"{existing}{self.SEPARATOR}_Updated: {stamp}_\n\n{documentation}"
            else:
                content = documentation
            _atomic_write(target, content)
            self.logger.info("Centralized documentation: %s", self._display(target))
            paths.append(target)

        return paths

    def write_audit(self, report: str) -> Path:
        target = self.audit_path
        _atomic_write(target, report)
        self.logger.info("Audit report: %s", self._display(target))
        return target

    def _display(self, path: Path) -> str:
        try:
            return path.relative_to(self.config.workspace).as_posix()
        except ValueError:
            return str(path)


def _atomic_write(target: Path, content: str) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


__all__ = ["AUDIT_FILENAME", "DocumentationWriter"]
