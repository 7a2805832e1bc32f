"""
GitHub token lookup from AWS Secrets Manager.

The secret string is either the bare token or JSON with a GITHUB_API_TOKEN key.
"""

from __future__ import annotations

import importlib
import json


def _boto3():
    # Allow tests to monkeypatch module-level `boto3` symbol.
    return globals().get("boto3") or importlib.import_module("boto3")


def load_github_token(secret_name: str) -> str | None:
    """Return the token stored in `secret_name`, or None if the secret is empty."""
    sm = _boto3().client("secretsmanager")
    resp = sm.get_secret_value(SecretId=secret_name)
    raw = (resp.get("SecretString") or "").strip()
    if not raw:
        return None
    if raw.startswith("{"):
        data = json.loads(raw)
        return data.get("GITHUB_API_TOKEN") or None
    return raw
