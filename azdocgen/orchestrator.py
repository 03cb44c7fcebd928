"""Routes a triggering event to the pull-request, push or audit flow."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Protocol, Sequence

from .config import ActionConfig
from .events import (
    ZERO_SHA,
    Event,
    PullRequestEvent,
    PushEvent,
    ScheduledEvent,
    UnsupportedEvent,
)
from .git.diff import extract_diffs
from .git.github import GitHubAPIError
from .git.patterns import filter_paths, matches
from .git.publisher import CommitPublisher
from .llm.runner import DocumentationGenerator
from .logging import get_logger
from .models import ChangedFile, EventMetadata, FileDiff, PullRequestMetadata, PushMetadata
from .outputs import ActionOutputs
from .postproc.audit import build_audit_report
from .postproc.comment import CommentSummary, find_marked_comment, render_comment, tagged_title
from .writer import DocumentationWriter

SKIP_MARKER = "[skip ci]"
AUDIT_COMMIT_MESSAGE = "docs: automated Azure integration audit"


class RepositoryClient(Protocol):
    def list_pull_files(self, number: int) -> List[Dict[str, Any]]: ...

    def list_pull_commits(self, number: int) -> List[Dict[str, Any]]: ...

    def compare_commits(self, base: str, head: str) -> List[Dict[str, Any]]: ...

    def get_tree(self, sha: str, *, recursive: bool = False) -> Dict[str, Any]: ...

    def list_issue_comments(self, number: int) -> List[Dict[str, Any]]: ...

    def create_issue_comment(self, number: int, body: str) -> Dict[str, Any]: ...

    def update_issue_comment(self, comment_id: int, body: str) -> Dict[str, Any]: ...

    def update_pull_title(self, number: int, title: str) -> None: ...


class Generator(Protocol):
    def generate(self, diffs: Sequence[FileDiff], metadata: EventMetadata) -> str: ...


class DocsPublisher(Protocol):
    def publish(self, branch: str, paths: Sequence[Path | str], message: str) -> str: ...


def _utc_now() -> datetime:
    return datetime.now(UTC)


class Orchestrator:
    """Runs one of the three documentation flows for a single event."""

    def __init__(
        self,
        config: ActionConfig,
        client: RepositoryClient,
        *,
        generator: Generator | None = None,
        publisher: DocsPublisher | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        self.client = client
        self.generator = generator or DocumentationGenerator(config)
        self.publisher = publisher or CommitPublisher(client, config.workspace)  # type: ignore[arg-type]
        self.clock = clock or _utc_now
        self.logger = get_logger("orchestrator")
        self._handlers: Dict[type, Callable[[Any], ActionOutputs]] = {
            PullRequestEvent: self.handle_pull_request,
            PushEvent: self.handle_push,
            ScheduledEvent: self.handle_scheduled_audit,
            UnsupportedEvent: self.handle_unsupported,
        }

    def run(self, event: Event) -> ActionOutputs:
        """Handle the event and apply the fail-on-error policy."""
        try:
            return self.handle(event)
        except Exception as exc:
            if self.config.fail_on_error:
                raise
            self.logger.warning("Action encountered an error but continuing: %s", exc)
            self.logger.debug("Failure details", exc_info=True)
            return ActionOutputs.empty()

    def handle(self, event: Event) -> ActionOutputs:
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"No handler for event type {type(event).__name__}")
        return handler(event)

    # ------------------------------------------------------------------
    # Flows

    def handle_pull_request(self, event: PullRequestEvent) -> ActionOutputs:
        self.logger.info("Processing PR #%d: %s", event.number, event.title)

        if event.action == "synchronize" and self._latest_commit_skipped(event.number):
            self.logger.info("Skipping - last commit was auto-generated documentation")
            return ActionOutputs.empty()

        records = self.client.list_pull_files(event.number)
        diffs = self._collect_diffs(records, origin="this PR")
        if not diffs:
            return ActionOutputs.empty()

        metadata = PullRequestMetadata(
            title=event.title,
            number=event.number,
            body=event.body,
            author=event.author,
        )
        self.logger.info("Generating documentation with AI...")
        documentation = self.generator.generate(diffs, metadata)

        paths = self._writer(self.config).write(documentation, event.number)
        self.publisher.publish(event.head_branch, paths, self.config.commit_message)
        self.logger.info("Documentation committed successfully!")

        display_paths = self._display_paths(paths)
        comment_created = False
        if self.config.create_pr_comment:
            summary = CommentSummary(
                files_processed=len(diffs),
                doc_paths=display_paths,
                documentation=documentation,
                is_update=event.action == "synchronize",
            )
            comment_created = self._publish_comment(event.number, summary)

        if self.config.update_pr_title and event.action == "synchronize":
            self._update_title(event.number, event.title)

        return ActionOutputs(
            docs_updated=True,
            files_processed=len(diffs),
            documentation_path=", ".join(display_paths),
            changes_summary=f"{len(diffs)} Azure files modified in PR #{event.number}",
            pr_comment_created=comment_created,
        )

    def handle_push(self, event: PushEvent) -> ActionOutputs:
        self.logger.info("Processing push to %s", event.ref)
        commits = event.commits[-self.config.max_commits_to_analyze:]
        self.logger.info("Analyzing %d recent commit(s)...", len(commits))

        if event.before == ZERO_SHA:
            self.logger.info("Push created %s; there is no previous commit to compare against.", event.ref)
            return ActionOutputs.empty()

        records = self.client.compare_commits(event.before, event.after)
        diffs = self._collect_diffs(records, origin="this push")
        if not diffs:
            return ActionOutputs.empty()

        metadata = PushMetadata(
            branch=event.branch,
            title=f"Commit {event.after[:7]} to {event.ref}",
            commits=tuple(commits),
        )
        documentation = self.generator.generate(diffs, metadata)

        # A push has no PR to attach per-PR docs to.
        config = self.config.with_mode("centralized") if self.config.mode == "pr" else self.config
        paths = self._writer(config).write(documentation, None)
        self.publisher.publish(event.branch, paths, self.config.commit_message)
        self.logger.info("Documentation committed successfully!")

        return ActionOutputs(
            docs_updated=True,
            files_processed=len(diffs),
            documentation_path=", ".join(self._display_paths(paths)),
            changes_summary=f"{len(diffs)} Azure files modified in {len(commits)} commit(s)",
        )

    def handle_scheduled_audit(self, event: ScheduledEvent) -> ActionOutputs:
        self.logger.info("Running scheduled Azure integration audit...")
        tree = self.client.get_tree(event.sha or event.branch, recursive=True)
        if tree.get("truncated"):
            self.logger.warning("Repository tree was truncated by the API; the audit may be incomplete")
        blobs = [
            str(item.get("path"))
            for item in tree.get("tree") or []
            if isinstance(item, dict) and item.get("type") == "blob"
        ]
        matched = [path for path in blobs if matches(path, self.config.file_patterns)]
        self.logger.info("Found %d Azure integration files in repository", len(matched))
        if not matched:
            self.logger.info("No Azure integration files found. Skipping audit.")
            return ActionOutputs.empty()

        report = build_audit_report(matched, generated=self.clock())
        path = self._writer(self.config).write_audit(report)
        self.publisher.publish(event.branch, [path], AUDIT_COMMIT_MESSAGE)
        self.logger.info("Audit documentation generated!")

        return ActionOutputs(
            docs_updated=True,
            files_processed=len(matched),
            documentation_path=", ".join(self._display_paths([path])),
            changes_summary=f"Audit found {len(matched)} Azure integration files",
        )

    def handle_unsupported(self, event: UnsupportedEvent) -> ActionOutputs:
        self.logger.info("Event type '%s' not supported. Skipping...", event.name)
        return ActionOutputs.empty()

    # ------------------------------------------------------------------
    # Helpers

    def _collect_diffs(self, records: Sequence[Dict[str, Any]], *, origin: str) -> List[FileDiff]:
        files = [ChangedFile.from_api(record) for record in records]
        azure_files = filter_paths(files, self.config.file_patterns)
        if not azure_files:
            if self.config.skip_if_no_changes:
                self.logger.info("No Azure integration files detected in %s. Skipping.", origin)
            else:
                self.logger.info("No Azure integration files detected in %s.", origin)
            return []
        self.logger.info("Found %d Azure integration file(s):", len(azure_files))
        for changed in azure_files:
            self.logger.info("  - %s (%s)", changed.path, changed.status)
        return extract_diffs(azure_files)

    def _latest_commit_skipped(self, number: int) -> bool:
        commits = self.client.list_pull_commits(number)
        if not commits:
            return False
        commit = commits[-1].get("commit") or {}
        message = commit.get("message") if isinstance(commit, dict) else None
        return isinstance(message, str) and SKIP_MARKER in message

    def _publish_comment(self, number: int, summary: CommentSummary) -> bool:
        try:
            if self.config.auto_update_pr:
                timestamp = self.clock().isoformat(timespec="milliseconds").replace("+00:00", "Z")
                body = render_comment(summary, managed=True, timestamp=timestamp)
                existing = find_marked_comment(self.client.list_issue_comments(number))
                comment_id = _comment_id(existing)
                if comment_id is not None:
                    self.client.update_issue_comment(comment_id, body)
                    self.logger.info("PR comment updated")
                    return True
            else:
                body = render_comment(summary, managed=False)
            self.client.create_issue_comment(number, body)
            self.logger.info("PR comment created")
            return True
        except GitHubAPIError as exc:
            self.logger.warning("Failed to update/create PR comment: %s", exc)
            return False

    def _update_title(self, number: int, title: str) -> None:
        new_title = tagged_title(title)
        if new_title is None:
            return
        try:
            self.client.update_pull_title(number, new_title)
        except GitHubAPIError as exc:
            self.logger.warning("Failed to update PR title: %s", exc)
            return
        self.logger.info("PR title updated: %s", new_title)

    def _writer(self, config: ActionConfig) -> DocumentationWriter:
        return DocumentationWriter(config, clock=self.clock)

    def _display_paths(self, paths: Sequence[Path]) -> List[str]:
        display: List[str] = []
        for path in paths:
            try:
                display.append(path.relative_to(self.config.workspace).as_posix())
            except ValueError:
                display.append(str(path))
        return display


def _comment_id(comment: Mapping[str, object] | None) -> int | None:
    """Return the numeric id of a marked comment, or None when it has no usable id."""
    value = comment.get("id") if comment is not None else None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


__all__ = ["AUDIT_COMMIT_MESSAGE", "Orchestrator", "SKIP_MARKER"]
