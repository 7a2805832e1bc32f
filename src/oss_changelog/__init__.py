"""
OSS Changelog (Lambda + GitHub Issues)

Where: AWS Lambda via Function URL, or any webtask-style (context, req, res) runtime.
What:  Resolve a milestone, fetch its closed issues/PRs, bucket PRs by CH: label.
Why:   Draft a Keep a Changelog section (JSON or Markdown) straight from GitHub.
"""

__all__ = [
    "config",
    "handler",
    "github",
    "changelog",
    "credentials",
    "render",
]
