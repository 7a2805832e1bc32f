import json

import pytest

import oss_changelog.credentials as creds


class FakeSecrets:
    def __init__(self, secret_string):
        self.secret_string = secret_string
        self.asked = []

    def get_secret_value(self, SecretId: str):
        self.asked.append(SecretId)
        return {"SecretString": self.secret_string}


def _install(monkeypatch, secret_string):
    sm = FakeSecrets(secret_string)

    class BotoModule:
        def client(self, name: str):
            if name == "secretsmanager":
                return sm
            raise ValueError(name)

    monkeypatch.setitem(creds.__dict__, "boto3", BotoModule())
    return sm


@pytest.mark.parametrize(
    "secret,expect",
    [
        ("ghp_plain", "ghp_plain"),
        (json.dumps({"GITHUB_API_TOKEN": "ghp_json"}), "ghp_json"),
        (json.dumps({"other": "x"}), None),
        ("", None),
    ],
)
def test_load_github_token(monkeypatch, secret, expect):
    sm = _install(monkeypatch, secret)
    assert creds.load_github_token("oss-changelog/github") == expect
    assert sm.asked == ["oss-changelog/github"]
