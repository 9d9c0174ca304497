from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from diffpane.core.diff_parser import diff_stats, extract_file_name, parse_diff, split_file_diffs
from diffpane.core.link_parser import parse_diff_link
from diffpane.core.types import FileDiff, ParsedDiff
from diffpane.storage.config import AppConfig

logger = logging.getLogger(__name__)


def load_diff(text: str, *, file_name: str = "") -> ParsedDiff:
    """Parse diff text into a ParsedDiff. A caller-supplied `file_name` wins over the "+++" scan."""
    lines = parse_diff(text)
    return ParsedDiff(
        file_name=file_name or extract_file_name(text),
        lines=tuple(lines),
        stats=diff_stats(lines),
    )


@dataclass
class DiffService:
    cfg: AppConfig

    @staticmethod
    def from_config(cfg: AppConfig) -> "DiffService":
        return DiffService(cfg=cfg)

    def load(self, text: str) -> ParsedDiff:
        return load_diff(text)

    def load_files(self, text: str) -> List[ParsedDiff]:
        return self._load_all(split_file_diffs(text))

    def fetch(self, link: str) -> List[ParsedDiff]:
        parsed = parse_diff_link(link)
        from diffpane.sources.base import SourceContext
        from diffpane.sources.registry import source_for

        source = source_for(parsed)
        token = self.cfg.token_for(parsed.source, parsed.host)
        logger.debug("Fetching %s via %s source (token: %s)", link, source.name(), "yes" if token else "no")
        files = source.fetch(SourceContext(link=link, token=token))
        return self._load_all(files)

    def _load_all(self, files: List[FileDiff]) -> List[ParsedDiff]:
        out = [load_diff(f.text, file_name=f.path) for f in files]
        logger.debug("Loaded %d file diff(s)", len(out))
        return out
