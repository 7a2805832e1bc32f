"""
Configuration helpers and defaults.

Centralize tunables to avoid magic numbers in code/tests.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env(name: str, default: str | None = None) -> str | None:
    v = os.getenv(name)
    return v if v is not None else default


@dataclass(frozen=True)
class Settings:
    github_api_url: str
    github_owner: str
    github_timeout_seconds: int
    github_user_agent: str
    github_per_page: int
    github_api_token: str | None
    github_token_secret_name: str | None


def load_settings() -> Settings:
    """Load settings from environment with safe defaults for local tests."""

    return Settings(
        github_api_url=(_env("GITHUB_API_URL") or "https://api.github.com").rstrip("/"),
        github_owner=_env("GITHUB_OWNER", "auth0") or "auth0",
        github_timeout_seconds=int(_env("GITHUB_TIMEOUT_SECONDS", "5") or 5),
        github_user_agent=_env("GITHUB_USER_AGENT", "auth0-oss-changelog")
        or "auth0-oss-changelog",
        github_per_page=int(_env("GITHUB_PER_PAGE", "100") or 100),
        github_api_token=_env("GITHUB_API_TOKEN") or None,
        github_token_secret_name=_env("GITHUB_TOKEN_SECRET_NAME") or None,
    )
