"""Git publishing through the GitHub git-data API."""

from __future__ import annotations

import base64
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Protocol, Sequence

from ..logging import get_logger

MAX_BLOB_WORKERS = 4


class CommitError(RuntimeError):
    """Raised when any step of building the documentation commit fails."""

    def __init__(self, step: str, message: str) -> None:
        super().__init__(f"Failed to commit documentation ({step}): {message}")
        self.step = step


class GitDataClient(Protocol):
    def get_ref(self, ref: str) -> Dict[str, object]: ...

    def get_commit(self, sha: str) -> Dict[str, object]: ...

    def create_blob(self, content_b64: str) -> Dict[str, object]: ...

    def create_tree(self, base_tree: str, entries: List[Dict[str, str]]) -> Dict[str, object]: ...

    def create_commit(self, message: str, tree: str, parents: List[str]) -> Dict[str, object]: ...

    def update_ref(self, ref: str, sha: str) -> Dict[str, object]: ...


class CommitPublisher:
    """Turns local documentation files into a single commit on a branch."""

    def __init__(self, client: GitDataClient, workspace: Path | str) -> None:
        self.client = client
        self.workspace = Path(workspace)
        self.logger = get_logger("publisher")

    def publish(self, branch: str, paths: Sequence[Path | str], message: str) -> str:
        """Commit the files to ``branch`` and return the new commit SHA.

        The ref is moved with a plain update (no compare-and-swap), so two runs
        racing on the same branch can overwrite each other's commit.
        """
        if not paths:
            raise CommitError("blob", "no files to commit")
        ref = f"heads/{branch}"
        self.logger.info("Committing %d file(s) to branch: %s", len(paths), branch)

        ref_data = self._step("ref", self.client.get_ref, ref)
        base_commit = _sha(ref_data.get("object"), "ref")

        commit_data = self._step("commit", self.client.get_commit, base_commit)
        base_tree = _sha(commit_data.get("tree"), "commit")

        entries = self._create_blobs(paths)

        tree_data = self._step("tree", self.client.create_tree, base_tree, entries)
        new_tree = _sha(tree_data, "tree")

        new_commit_data = self._step(
            "commit", self.client.create_commit, message, new_tree, [base_commit]
        )
        new_commit = _sha(new_commit_data, "commit")

        self._step("update-ref", self.client.update_ref, ref, new_commit)
        self.logger.info("Commit created: %s", new_commit)
        return new_commit

    # ------------------------------------------------------------------
    # Helpers

    def _create_blobs(self, paths: Sequence[Path | str]) -> List[Dict[str, str]]:
        files = [Path(path) for path in paths]
        workers = min(MAX_BLOB_WORKERS, len(files))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            shas = list(pool.map(self._create_blob, files))
        return [
            {"path": self._to_relative(path), "mode": "100644", "type": "blob", "sha": sha}
            for path, sha in zip(files, shas)
        ]

    def _create_blob(self, path: Path) -> str:
        local = path if path.is_absolute() else self.workspace / path
        try:
            content = local.read_bytes()
        except OSError as exc:
            raise CommitError("blob", f"cannot read {local}: {exc}") from exc
        encoded = base64.b64encode(content).decode("ascii")
        blob = self._step("blob", self.client.create_blob, encoded)
        return _sha(blob, "blob")

    def _to_relative(self, path: Path) -> str:
        if not path.is_absolute():
            return path.as_posix()
        try:
            return path.relative_to(self.workspace).as_posix()
        except ValueError:
            return path.as_posix()

    @staticmethod
    def _step(step: str, func, *args):  # type: ignore[no-untyped-def]
        try:
            result = func(*args)
        except CommitError:
            raise
        except Exception as exc:
            raise CommitError(step, str(exc)) from exc
        return result if isinstance(result, dict) else {}


def _sha(payload: object, step: str) -> str:
    sha = payload.get("sha") if isinstance(payload, dict) else None
    if not isinstance(sha, str) or not sha:
        raise CommitError(step, "response did not include a SHA")
    return sha


__all__ = ["CommitError", "CommitPublisher"]
