"""
Minimal GitHub REST API client (v3) using stdlib urllib.

Only the two read endpoints the changelog needs: milestones and repo issues.
"""

from __future__ import annotations

import json
import urllib.error
import urllib.parse
import urllib.request
from typing import Any


class UpstreamError(Exception):
    """A GitHub call failed (HTTP error status or transport failure)."""

    def __init__(self, message: str, code: int | None = None, status: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status

    def as_dict(self) -> dict[str, Any]:
        return {"code": self.code, "status": self.status, "message": self.message}


class GitHubClient:
    def __init__(
        self,
        base_url: str = "https://api.github.com",
        token: str | None = None,
        timeout: int = 5,
        user_agent: str = "auth0-oss-changelog",
        per_page: int = 100,
    ) -> None:
        self.base_api = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.user_agent = user_agent
        self.per_page = per_page

    # ----- Helpers -----
    def _url(self, path: str, params: dict[str, Any] | None = None) -> str:
        p: dict[str, Any] = {"per_page": self.per_page}
        if params:
            p.update(params)
        return self.base_api + path + "?" + urllib.parse.urlencode(p)

    def _headers(self) -> dict[str, str]:
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/vnd.github.v3+json",
        }
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    def _get_json(self, url: str) -> Any:
        req = urllib.request.Request(url, headers=self._headers())
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:  # nosec B310
                data = resp.read()
        except urllib.error.HTTPError as e:
            raise UpstreamError(_error_message(e), code=e.code, status=str(e.reason)) from e
        except urllib.error.URLError as e:
            raise UpstreamError(str(e.reason), status="network error") from e
        except TimeoutError as e:
            raise UpstreamError(f"timed out after {self.timeout}s", status="timeout") from e
        return json.loads(data.decode("utf-8"))

    # ----- Public APIs -----
    def list_milestones(self, owner: str, repo: str, state: str = "open") -> list[dict[str, Any]]:
        path = f"/repos/{urllib.parse.quote(owner)}/{urllib.parse.quote(repo)}/milestones"
        url = self._url(path, {"state": state})
        return _as_list(self._get_json(url), path)

    def list_repo_issues(
        self, owner: str, repo: str, milestone: int | str, state: str = "closed"
    ) -> list[dict[str, Any]]:
        path = f"/repos/{urllib.parse.quote(owner)}/{urllib.parse.quote(repo)}/issues"
        url = self._url(path, {"milestone": milestone, "state": state})
        return _as_list(self._get_json(url), path)


def _error_message(err: urllib.error.HTTPError) -> str:
    # GitHub error bodies look like {"message": "Not Found", "documentation_url": ...}
    try:
        body = json.loads(err.read().decode("utf-8"))
    except Exception:
        return str(err.reason)
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return str(err.reason)


def _as_list(data: Any, path: str) -> list[dict[str, Any]]:
    if not isinstance(data, list):
        raise UpstreamError(
            f"unexpected payload from {path}: expected a list, got {type(data).__name__}",
            status="bad payload",
        )
    return data
