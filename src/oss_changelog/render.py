"""
Content negotiation and Keep a Changelog rendering (JSON / Markdown).
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from .changelog import CATEGORIES, ClassifiedResult

JSON = "json"
MARKDOWN = "markdown"

CONTENT_TYPES = {
    JSON: "application/json; charset=UTF-8",
    MARKDOWN: "text/markdown; charset=UTF-8",
}


def _header(headers: Mapping[str, Any] | None, name: str) -> str | None:
    for k, v in (headers or {}).items():
        if k.lower() == name.lower():
            return v
    return None


def negotiate(headers: Mapping[str, Any] | None) -> str:
    """Accept, then Content-Type, then application/json."""
    value = _header(headers, "accept") or _header(headers, "content-type") or "application/json"
    return MARKDOWN if value.startswith("text/markdown") else JSON


def render_json(result: ClassifiedResult) -> str:
    return json.dumps(result.to_json(), ensure_ascii=False, separators=(",", ":"))


def render_markdown(result: ClassifiedResult) -> str:
    lines: list[str] = []
    if result.issues:
        lines.append("**Closed issues**\n")
        for i in result.issues:
            lines.append(f"- {i.title} [#{i.number}]({i.url})\n")

    for c in CATEGORIES:
        pulls = result.prs.get(c.key) or []
        if not pulls:
            continue
        lines.append("\n")
        lines.append(f"**{c.title}**\n")
        for p in pulls:
            lines.append(
                f"- {p.title} [#{p.number}]({p.url}) ([{p.user.login}]({p.user.url}))\n"
            )
    return "".join(lines)


def render(result: ClassifiedResult, fmt: str) -> tuple[str, str]:
    """Return (content_type, body) for the negotiated format."""
    if fmt == MARKDOWN:
        return CONTENT_TYPES[MARKDOWN], render_markdown(result)
    return CONTENT_TYPES[JSON], render_json(result)
