"""
AWS Lambda handler: GitHub milestone -> Keep a Changelog (JSON or Markdown).

Also exposes `handle(context, req, res)` for webtask-style runtimes.
"""

from __future__ import annotations

import base64
import json
import logging
import os
import time
import urllib.parse
from collections.abc import Mapping
from typing import Any

from .changelog import ChangelogError, ClassifiedResult, build_changelog
from .config import Settings, load_settings
from .credentials import load_github_token
from .github import GitHubClient, UpstreamError
from .render import negotiate, render

logger = logging.getLogger(__name__)

PARAMS = ("repo", "milestone", "state", "GITHUB_API_TOKEN")


def _configure_logging() -> None:
    level_name = (os.getenv("LOG_LEVEL") or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logger.setLevel(level)
    root = logging.getLogger()
    if root.level and root.level > level:
        root.setLevel(level)


def _rid(context: Any) -> str | None:
    try:
        return getattr(context, "aws_request_id", None)
    except Exception:
        return None


def _log(msg: str, **fields: Any) -> None:
    try:
        rec = {"msg": msg, **fields}
        logger.info(json.dumps(rec, ensure_ascii=False))
    except Exception:
        # Fallback to plain log
        logger.info("%s | %s", msg, fields)


def _response(status: int, body: str, content_type: str = "application/json") -> dict[str, Any]:
    return {
        "statusCode": status,
        "headers": {"Content-Type": content_type},
        "body": body,
    }


def _get_body(event: dict[str, Any]) -> dict[str, Any]:
    body = event.get("body")
    try:
        if event.get("isBase64Encoded"):
            body = base64.b64decode(body or b"", validate=True)
        if isinstance(body, (bytes, bytearray)):
            body = body.decode("utf-8")
        data = json.loads(body or "{}")
    except Exception:
        # Unreadable body: params stay missing and validation reports them.
        return {}
    return data if isinstance(data, dict) else {}


def _get_query_params(event: dict[str, Any]) -> dict[str, Any]:
    qs = event.get("queryStringParameters")
    if isinstance(qs, dict) and qs:
        return qs
    # Fallback to rawQueryString parsing (API variations)
    raw = event.get("rawQueryString") or ""
    return dict(urllib.parse.parse_qsl(raw))


def _get_params(event: dict[str, Any]) -> dict[str, Any]:
    """Query string parameters, overlaid by a JSON body."""
    params: dict[str, Any] = {}
    qs = _get_query_params(event)
    params.update({k: v for k, v in qs.items() if k in PARAMS})
    body = _get_body(event)
    params.update({k: v for k, v in body.items() if k in PARAMS})
    return params


def _context_data(context: Any) -> dict[str, Any]:
    data = getattr(context, "data", None)
    if data is None and isinstance(context, Mapping):
        data = context.get("data")
    if data is None:
        return {}
    if isinstance(data, Mapping):
        return {k: data.get(k) for k in PARAMS}
    return {k: getattr(data, k, None) for k in PARAMS}


def _resolve_token(params: Mapping[str, Any], settings: Settings) -> str | None:
    token = params.get("GITHUB_API_TOKEN") or settings.github_api_token
    if token:
        return token
    if settings.github_token_secret_name:
        return load_github_token(settings.github_token_secret_name)
    return None


def _error_value(e: Exception) -> Any:
    if isinstance(e, UpstreamError):
        return e.as_dict()
    return str(e)


def _run(
    params: Mapping[str, Any], headers: Mapping[str, Any] | None, rid: str | None
) -> tuple[int, str, str]:
    """Run the pipeline; return (status, content_type, body)."""
    _configure_logging()
    settings = load_settings()
    start_ts = time.time()

    fmt = negotiate(headers)
    _log("format_negotiated", rid=rid, format=fmt)

    repo = params.get("repo")
    milestone = params.get("milestone")
    state = params.get("state") or "open"

    try:
        client = GitHubClient(
            settings.github_api_url,
            token=_resolve_token(params, settings),
            timeout=settings.github_timeout_seconds,
            user_agent=settings.github_user_agent,
            per_page=settings.github_per_page,
        )
        result: ClassifiedResult = build_changelog(
            client, settings.github_owner, repo, milestone, state
        )
        content_type, body = render(result, fmt)
    except Exception as e:
        if not isinstance(e, (ChangelogError, UpstreamError)):
            logger.exception("Changelog generation failed")
        _log(
            "changelog_failed",
            rid=rid,
            repo=repo,
            milestone=milestone,
            state=state,
            kind=type(e).__name__,
            error=str(e),
        )
        # Errors are always JSON, whatever was negotiated.
        body = json.dumps({"error": _error_value(e)}, ensure_ascii=False)
        return 500, "application/json", body

    _log(
        "changelog_ok",
        rid=rid,
        repo=repo,
        milestone=milestone,
        state=state,
        format=fmt,
        issues=len(result.issues),
        prs={k: len(v) for k, v in result.prs.items()},
        ms_total=int((time.time() - start_ts) * 1000),
    )
    return 200, content_type, body


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    status, content_type, body = _run(_get_params(event), event.get("headers"), _rid(context))
    return _response(status, body, content_type)


def handle(context: Any, request: Any, response: Any) -> None:
    """Webtask-style entry: params from `context.data`, reply via `response`.

    `response` must provide `write_head(status, headers)` and `end(body)`.
    """
    headers = getattr(request, "headers", None)
    if headers is None and isinstance(request, Mapping):
        headers = request.get("headers")
    status, content_type, body = _run(_context_data(context), headers, _rid(context))
    response.write_head(status, {"Content-Type": content_type})
    response.end(body)
