import pytest


def gh_issue(number, title, labels=(), pull=False, login="hzalaz"):
    kind = "pull" if pull else "issues"
    rec = {
        "number": number,
        "title": title,
        "html_url": f"https://github.com/auth0/node-auth0/{kind}/{number}",
        "labels": [{"name": n} for n in labels],
        "user": {"login": login, "html_url": f"https://github.com/{login}"},
    }
    if pull:
        rec["pull_request"] = {"url": f"https://api.github.com/repos/auth0/node-auth0/pulls/{number}"}
    return rec


class FakeGitHub:
    def __init__(self, milestones=None, issues=None, error=None):
        self.milestones = milestones or []
        self.issues = issues or []
        self.error = error
        self.calls = []

    def list_milestones(self, owner, repo, state="open"):
        self.calls.append(("list_milestones", owner, repo, state))
        if self.error:
            raise self.error
        return self.milestones

    def list_repo_issues(self, owner, repo, milestone, state="closed"):
        self.calls.append(("list_repo_issues", owner, repo, milestone, state))
        return self.issues


@pytest.fixture
def pr_added():
    return gh_issue(11, "Add users API", labels=["CH: Added"], pull=True)


@pytest.fixture
def closed_issue():
    return gh_issue(12, "Crash on login", labels=["bug"])


@pytest.fixture
def fake_github(pr_added, closed_issue):
    return FakeGitHub(
        milestones=[{"number": 7, "title": "v2.0.0", "state": "closed"}],
        issues=[pr_added, closed_issue],
    )


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "GITHUB_API_URL",
        "GITHUB_OWNER",
        "GITHUB_API_TOKEN",
        "GITHUB_TOKEN_SECRET_NAME",
        "GITHUB_TIMEOUT_SECONDS",
        "GITHUB_PER_PAGE",
        "GITHUB_USER_AGENT",
    ):
        monkeypatch.delenv(name, raising=False)
