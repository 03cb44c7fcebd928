"""Minimal GitHub REST client for the endpoints the action touches."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urlencode
from urllib.request import Request, urlopen

from ..logging import get_logger

DEFAULT_API_URL = "https://api.github.com"
PAGE_SIZE = 100


class GitHubAPIError(RuntimeError):
    """Raised when a GitHub REST call fails."""

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class GitHubClient:
    """Issues authenticated REST calls against a single repository."""

    def __init__(
        self,
        token: str,
        repository: str,
        *,
        api_url: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        if "/" not in repository:
            raise ValueError(f"Repository must look like 'owner/name', got '{repository}'")
        self.owner, self.repo = repository.split("/", 1)
        self.api_url = (api_url or DEFAULT_API_URL).rstrip("/")
        self.timeout = timeout
        self._token = token
        self.logger = get_logger("github")

    # ------------------------------------------------------------------
    # Pull requests and comparisons

    def list_pull_files(self, number: int) -> List[Dict[str, Any]]:
        return self._paginate(f"/pulls/{number}/files")

    def list_pull_commits(self, number: int) -> List[Dict[str, Any]]:
        return self._paginate(f"/pulls/{number}/commits")

    def compare_commits(self, base: str, head: str) -> List[Dict[str, Any]]:
        data = self._request("GET", f"/compare/{quote(base, safe='')}...{quote(head, safe='')}")
        files = data.get("files") if isinstance(data, dict) else None
        return list(files or [])

    def update_pull_title(self, number: int, title: str) -> None:
        self._request("PATCH", f"/pulls/{number}", {"title": title})

    # ------------------------------------------------------------------
    # Issue comments

    def list_issue_comments(self, number: int) -> List[Dict[str, Any]]:
        return self._paginate(f"/issues/{number}/comments")

    def create_issue_comment(self, number: int, body: str) -> Dict[str, Any]:
        return self._request("POST", f"/issues/{number}/comments", {"body": body})

    def update_issue_comment(self, comment_id: int, body: str) -> Dict[str, Any]:
        return self._request("PATCH", f"/issues/comments/{comment_id}", {"body": body})

    # ------------------------------------------------------------------
    # Git data

    def get_ref(self, ref: str) -> Dict[str, Any]:
        return self._request("GET", f"/git/ref/{quote(ref)}")

    def get_commit(self, sha: str) -> Dict[str, Any]:
        return self._request("GET", f"/git/commits/{sha}")

    def get_tree(self, sha: str, *, recursive: bool = False) -> Dict[str, Any]:
        query = {"recursive": "1"} if recursive else None
        return self._request("GET", f"/git/trees/{quote(sha, safe='')}", query=query)

    def create_blob(self, content_b64: str) -> Dict[str, Any]:
        return self._request(
            "POST", "/git/blobs", {"content": content_b64, "encoding": "base64"}
        )

    def create_tree(self, base_tree: str, entries: List[Mapping[str, str]]) -> Dict[str, Any]:
        return self._request(
            "POST", "/git/trees", {"base_tree": base_tree, "tree": list(entries)}
        )

    def create_commit(self, message: str, tree: str, parents: List[str]) -> Dict[str, Any]:
        return self._request(
            "POST", "/git/commits", {"message": message, "tree": tree, "parents": parents}
        )

    def update_ref(self, ref: str, sha: str) -> Dict[str, Any]:
        return self._request("PATCH", f"/git/refs/{quote(ref)}", {"sha": sha, "force": False})

    # ------------------------------------------------------------------
    # Transport

    def _paginate(self, path: str) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = []
        page = 1
        while True:
            batch = self._request("GET", path, query={"per_page": PAGE_SIZE, "page": page})
            if not isinstance(batch, list):
                raise GitHubAPIError(f"Expected a list from {path}")
            items.extend(batch)
            if len(batch) < PAGE_SIZE:
                return items
            page += 1

    def _request(
        self,
        method: str,
        path: str,
        body: Optional[Mapping[str, Any]] = None,
        *,
        query: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        url = f"{self.api_url}/repos/{self.owner}/{self.repo}{path}"
        if query:
            url = f"{url}?{urlencode(query)}"
        data = json.dumps(body).encode("utf-8") if body is not None else None
        headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self._token}",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "azdocgen",
        }
        if data is not None:
            headers["Content-Type"] = "application/json"

        self.logger.debug("GitHub %s %s", method, path)
        request = Request(url, data=data, headers=headers, method=method)
        try:
            with urlopen(request, timeout=self.timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = _error_message(detail) or exc.reason
            raise GitHubAPIError(
                f"GitHub {method} {path} failed with status {exc.code}: {message}",
                status=exc.code,
            ) from exc
        except URLError as exc:
            raise GitHubAPIError(f"GitHub {method} {path} failed: {exc.reason}") from exc

        if not raw:
            return {}
        try:
            return json.loads(raw.decode("utf-8"))
        except json.JSONDecodeError as exc:
            raise GitHubAPIError(f"GitHub {method} {path} returned invalid JSON") from exc


def _error_message(detail: str) -> str:
    detail = detail.strip()
    if not detail:
        return ""
    try:
        payload = json.loads(detail)
    except json.JSONDecodeError:
        return detail
    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        return payload["message"]
    return detail


__all__ = ["GitHubAPIError", "GitHubClient"]
