import json
import types

import oss_changelog.handler as h


class FakeResponse:
    def __init__(self):
        self.status = None
        self.headers = None
        self.body = None

    def write_head(self, status, headers):
        self.status = status
        self.headers = headers

    def end(self, body=None):
        self.body = body


def test_handle_markdown_from_context_data(monkeypatch, fake_github):
    monkeypatch.setitem(h.__dict__, "GitHubClient", lambda *_a, **_k: fake_github)
    context = types.SimpleNamespace(
        data={"repo": "node-auth0", "milestone": "v2.0.0", "state": "closed"}
    )
    req = types.SimpleNamespace(headers={"content-type": "text/markdown"})
    res = FakeResponse()

    h.handle(context, req, res)

    assert res.status == 200
    assert res.headers == {"Content-Type": "text/markdown; charset=UTF-8"}
    assert res.body.startswith("**Closed issues**\n")


def test_handle_accepts_attribute_data_and_dict_request(monkeypatch, fake_github):
    made = []

    def factory(*a, **k):
        made.append(k)
        return fake_github

    monkeypatch.setitem(h.__dict__, "GitHubClient", factory)
    data = types.SimpleNamespace(
        repo="node-auth0", milestone="v2.0.0", state="closed", GITHUB_API_TOKEN="secret"
    )
    res = FakeResponse()

    h.handle(types.SimpleNamespace(data=data), {"headers": {}}, res)

    assert res.status == 200
    assert res.headers["Content-Type"] == "application/json; charset=UTF-8"
    assert json.loads(res.body)["prs"]["added"][0]["number"] == 11
    assert made[0]["token"] == "secret"


def test_handle_missing_repo(monkeypatch):
    res = FakeResponse()
    h.handle(types.SimpleNamespace(data={"milestone": "v2.0.0"}), {"headers": {}}, res)
    assert res.status == 500
    assert res.headers == {"Content-Type": "application/json"}
    assert json.loads(res.body) == {"error": "Invalid repo. Missing param repo"}
