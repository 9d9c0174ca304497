from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from diffpane.core.host import normalize_host


@dataclass(frozen=True)
class ParsedLink:
    kind: str  # github_pr|github_commit|raw
    host: str
    url: str
    owner: Optional[str] = None
    repo: Optional[str] = None
    number: Optional[int] = None  # pull request number
    sha: Optional[str] = None  # commit sha

    @property
    def source(self) -> str:
        return "github" if self.kind.startswith("github_") else "raw"


def _is_github_host(host: str) -> bool:
    # github.com or a GitHub Enterprise host like github.example.com
    return host == "github.com" or host.startswith("github.")


def parse_diff_link(link: str) -> ParsedLink:
    u = urlparse((link or "").strip())
    if u.scheme not in {"http", "https"} or not u.netloc:
        raise ValueError("Invalid URL (expected an http(s) link to a pull request, commit or patch)")
    host = normalize_host(u.netloc)
    path = (u.path or "").rstrip("/")

    if _is_github_host(host):
        # /{owner}/{repo}/pull/{number}[/files]
        m = re.match(r"^/([^/]+)/([^/]+)/pull/(\d+)(?:/files)?$", path)
        if m:
            return ParsedLink(
                kind="github_pr",
                host=host,
                url=link,
                owner=m.group(1),
                repo=m.group(2),
                number=int(m.group(3)),
            )

        # /{owner}/{repo}/commit/{sha}
        m = re.match(r"^/([^/]+)/([^/]+)/commit/([0-9a-fA-F]{7,40})$", path)
        if m:
            return ParsedLink(
                kind="github_commit",
                host=host,
                url=link,
                owner=m.group(1),
                repo=m.group(2),
                sha=m.group(3).lower(),
            )

    # Anything else (including github.com/.../pull/1.diff) is fetched as-is.
    return ParsedLink(kind="raw", host=host, url=link)
