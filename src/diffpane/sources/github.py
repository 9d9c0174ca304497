from __future__ import annotations

import logging
from typing import List
from urllib.parse import urlparse

import httpx

from diffpane.core.errors import AuthRequiredError, SourceError
from diffpane.core.link_parser import parse_diff_link
from diffpane.core.types import FileDiff
from diffpane.sources.base import DiffSource, SourceContext

logger = logging.getLogger(__name__)

_PER_PAGE = 100
_MAX_PAGES = 20


class GitHubSource(DiffSource):
    """Per-file patches of a pull request or a single commit via the GitHub REST API."""

    def name(self) -> str:
        return "github"

    def fetch(self, ctx: SourceContext) -> List[FileDiff]:
        parsed = parse_diff_link(ctx.link)
        if parsed.kind not in {"github_pr", "github_commit"} or not parsed.owner or not parsed.repo:
            raise SourceError("Invalid GitHub pull request or commit link")

        u = urlparse(ctx.link)
        api_base = "https://api.github.com" if parsed.host == "github.com" else f"{u.scheme}://{parsed.host}/api/v3"
        headers = {"Accept": "application/vnd.github+json"}
        # Public repositories work without a token (rate limited).
        if ctx.token:
            headers["Authorization"] = f"Bearer {ctx.token}"

        repo_base = f"{api_base}/repos/{parsed.owner}/{parsed.repo}"
        with self._client(ctx) as client:
            if parsed.kind == "github_pr":
                files = _get_all_files(client, f"{repo_base}/pulls/{parsed.number}/files", headers=headers, host=parsed.host)
            else:
                commit = _get_json(client, f"{repo_base}/commits/{parsed.sha}", headers=headers, host=parsed.host)
                files = commit.get("files") or []

        out: List[FileDiff] = []
        for f in files:
            patch = f.get("patch")
            if not patch:
                # binary or too large for the API to inline
                logger.debug("Skipping %s: no patch in API response", f.get("filename"))
                continue
            out.append(FileDiff(path=f.get("filename") or "unknown", text=patch))
        logger.info("Fetched %d file diff(s) from %s", len(out), ctx.link)
        return out


def _raise_for_status(r: httpx.Response, host: str) -> None:
    if r.status_code in {401, 403}:
        raise AuthRequiredError("github", host, f"GitHub auth failed ({r.status_code}).")
    if r.status_code >= 400:
        raise SourceError(f"GitHub API error {r.status_code}: {r.text[:500]}")


def _get_json(client: httpx.Client, url: str, *, headers: dict, host: str) -> dict:
    r = client.get(url, headers=headers)
    _raise_for_status(r, host)
    return r.json()


def _get_all_files(client: httpx.Client, url: str, *, headers: dict, host: str) -> list:
    out = []
    page = 1
    while True:
        r = client.get(url, headers=headers, params={"per_page": _PER_PAGE, "page": page})
        _raise_for_status(r, host)
        items = r.json()
        if not items:
            break
        out.extend(items)
        if len(items) < _PER_PAGE or page >= _MAX_PAGES:
            break
        page += 1
    return out
