"""In-memory stand-ins for the GitHub REST client."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from azdocgen.git.github import GitHubAPIError


class FakeGitHub:
    """Records every call and serves canned repository data."""

    def __init__(
        self,
        *,
        pull_files: Optional[List[Dict[str, Any]]] = None,
        pull_commits: Optional[List[Dict[str, Any]]] = None,
        compare_files: Optional[List[Dict[str, Any]]] = None,
        tree: Optional[Dict[str, Any]] = None,
        comments: Optional[List[Dict[str, Any]]] = None,
        fail_on: Optional[set[str]] = None,
    ) -> None:
        self.pull_files = pull_files or []
        self.pull_commits = pull_commits or []
        self.compare_files = compare_files or []
        self.tree = tree or {"tree": []}
        self.comments = comments or []
        self.fail_on = fail_on or set()
        self.calls: List[tuple[str, tuple[Any, ...]]] = []
        self._blob_counter = 0

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if name in self.fail_on:
            raise GitHubAPIError(f"{name} failed", status=500)

    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]

    # Repository reads
    def list_pull_files(self, number: int) -> List[Dict[str, Any]]:
        self._record("list_pull_files", number)
        return list(self.pull_files)

    def list_pull_commits(self, number: int) -> List[Dict[str, Any]]:
        self._record("list_pull_commits", number)
        return list(self.pull_commits)

    def compare_commits(self, base: str, head: str) -> List[Dict[str, Any]]:
        self._record("compare_commits", base, head)
        return list(self.compare_files)

    def get_tree(self, sha: str, *, recursive: bool = False) -> Dict[str, Any]:
        self._record("get_tree", sha, recursive)
        return self.tree

    # Comments and titles
    def list_issue_comments(self, number: int) -> List[Dict[str, Any]]:
        self._record("list_issue_comments", number)
        return list(self.comments)

    def create_issue_comment(self, number: int, body: str) -> Dict[str, Any]:
        self._record("create_issue_comment", number, body)
        return {"id": 99, "body": body}

    def update_issue_comment(self, comment_id: int, body: str) -> Dict[str, Any]:
        self._record("update_issue_comment", comment_id, body)
        return {"id": comment_id, "body": body}

    def update_pull_title(self, number: int, title: str) -> None:
        self._record("update_pull_title", number, title)

    # Git data
    def get_ref(self, ref: str) -> Dict[str, Any]:
        self._record("get_ref", ref)
        return {"ref": f"refs/{ref}", "object": {"sha": "base-commit"}}

    def get_commit(self, sha: str) -> Dict[str, Any]:
        self._record("get_commit", sha)
        return {"sha": sha, "tree": {"sha": "base-tree"}}

    def create_blob(self, content_b64: str) -> Dict[str, Any]:
        self._record("create_blob", content_b64)
        self._blob_counter += 1
        return {"sha": f"blob-{content_b64[:8]}"}

    def create_tree(self, base_tree: str, entries: List[Dict[str, str]]) -> Dict[str, Any]:
        self._record("create_tree", base_tree, entries)
        return {"sha": "new-tree"}

    def create_commit(self, message: str, tree: str, parents: List[str]) -> Dict[str, Any]:
        self._record("create_commit", message, tree, parents)
        return {"sha": "new-commit"}

    def update_ref(self, ref: str, sha: str) -> Dict[str, Any]:
        self._record("update_ref", ref, sha)
        return {"ref": f"refs/{ref}", "object": {"sha": sha}}
