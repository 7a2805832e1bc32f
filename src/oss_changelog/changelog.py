"""
Milestone -> closed issues -> (issues, PRs by changelog category).

GitHub serves pull requests from the issues endpoint; an entry is a PR iff the
record carries a `pull_request` marker. That is decided once in
`entry_from_api`, everything downstream dispatches on the type.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from .github import GitHubClient

logger = logging.getLogger(__name__)


class ChangelogError(Exception):
    pass


class InvalidInput(ChangelogError):
    """A required parameter is missing; raised before any network call."""


class NotFound(ChangelogError):
    """No milestone with the requested title in the queried state."""


@dataclass(frozen=True)
class Category:
    label: str
    key: str
    title: str


# Declaration order is the Markdown section order.
CATEGORIES: tuple[Category, ...] = (
    Category("CH: Added", "added", "Added"),
    Category("CH: Changed", "changed", "Changed"),
    Category("CH: Deprecated", "deprecated", "Deprecated"),
    Category("CH: Removed", "removed", "Removed"),
    Category("CH: Fixed", "fixed", "Fixed"),
    Category("CH: Security", "security", "Security"),
    Category("CH: Breaking Change", "breakingChange", "Breaking changes"),
)


@dataclass(frozen=True)
class Milestone:
    number: int
    title: str
    state: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Milestone:
        return cls(
            number=data.get("number"),
            title=data.get("title") or "",
            state=data.get("state") or "",
        )


@dataclass(frozen=True)
class User:
    login: str
    url: str


@dataclass(frozen=True)
class Issue:
    number: int
    title: str
    url: str
    labels: frozenset[str]
    user: User
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def has_label(self, name: str) -> bool:
        return name in self.labels

    def to_json(self) -> dict[str, Any]:
        if self.raw:
            return self.raw
        return {
            "number": self.number,
            "title": self.title,
            "html_url": self.url,
            "labels": [{"name": n} for n in sorted(self.labels)],
            "user": {"login": self.user.login, "html_url": self.user.url},
        }


@dataclass(frozen=True)
class PullRequest(Issue):
    def to_json(self) -> dict[str, Any]:
        out = super().to_json()
        if not self.raw:
            out["pull_request"] = {}
        return out


def entry_from_api(data: dict[str, Any]) -> Issue:
    user = data.get("user") or {}
    kwargs = dict(
        number=data.get("number"),
        title=data.get("title") or "",
        url=data.get("html_url") or data.get("url") or "",
        labels=frozenset(
            (lbl or {}).get("name") for lbl in (data.get("labels") or []) if (lbl or {}).get("name")
        ),
        user=User(
            login=user.get("login") or "",
            url=user.get("html_url") or user.get("url") or "",
        ),
        raw=data,
    )
    if data.get("pull_request") is not None:
        return PullRequest(**kwargs)
    return Issue(**kwargs)


@dataclass
class ClassifiedResult:
    issues: list[Issue]
    prs: dict[str, list[PullRequest]]

    def to_json(self) -> dict[str, Any]:
        return {
            "issues": [i.to_json() for i in self.issues],
            "prs": {k: [p.to_json() for p in v] for k, v in self.prs.items()},
        }


def resolve_milestone(
    client: GitHubClient,
    owner: str,
    repo: str | None,
    title: str | None,
    state: str | None = "open",
) -> Milestone:
    if not repo:
        raise InvalidInput("Invalid repo. Missing param repo")
    if not title:
        raise InvalidInput("Invalid milestone. Missing param milestone")

    logger.debug("Fetching %s milestones for repo %s/%s", state or "open", owner, repo)
    milestones = client.list_milestones(owner, repo, state or "open")
    # First listed wins when titles repeat.
    for m in milestones:
        if m.get("title") == title:
            return Milestone.from_api(m)
    raise NotFound(f"Missing milestone {title}")


def fetch_closed_issues(
    client: GitHubClient, owner: str, repo: str | None, milestone_number: int | None
) -> list[Issue]:
    if not repo:
        raise InvalidInput("Invalid repo. Missing param repo")
    # Falsy check: a milestone numbered 0 is treated as missing too.
    if not milestone_number:
        raise InvalidInput(f"Invalid milestone. Missing param {milestone_number}")

    records = client.list_repo_issues(owner, repo, milestone_number, "closed")
    return [entry_from_api(r) for r in records]


def partition(entries: list[Issue]) -> tuple[list[Issue], list[PullRequest]]:
    issues: list[Issue] = []
    prs: list[PullRequest] = []
    for e in entries:
        if isinstance(e, PullRequest):
            prs.append(e)
        else:
            issues.append(e)
    return issues, prs


def filter_by_label(prs: list[PullRequest], label: str) -> list[PullRequest]:
    logger.debug("filtering for label %s", label)
    return [p for p in prs if p.has_label(label)]


def classify(prs: list[PullRequest]) -> dict[str, list[PullRequest]]:
    return {c.key: filter_by_label(prs, c.label) for c in CATEGORIES}


def build_changelog(
    client: GitHubClient,
    owner: str,
    repo: str | None,
    milestone: str | None,
    state: str | None = "open",
) -> ClassifiedResult:
    m = resolve_milestone(client, owner, repo, milestone, state)
    entries = fetch_closed_issues(client, owner, repo, m.number)
    issues, prs = partition(entries)
    return ClassifiedResult(issues=issues, prs=classify(prs))
