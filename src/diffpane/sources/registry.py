from __future__ import annotations

from diffpane.core.errors import UnsupportedSourceError
from diffpane.core.link_parser import ParsedLink
from diffpane.sources.base import DiffSource
from diffpane.sources.github import GitHubSource
from diffpane.sources.raw import RawUrlSource


def source_for(parsed: ParsedLink) -> DiffSource:
    if parsed.kind in {"github_pr", "github_commit"}:
        return GitHubSource()
    if parsed.kind == "raw":
        return RawUrlSource()
    raise UnsupportedSourceError(f"Unsupported diff link kind: {parsed.kind}")
