from __future__ import annotations

import logging
from typing import List

from diffpane.core.diff_parser import split_file_diffs
from diffpane.core.errors import AuthRequiredError, SourceError
from diffpane.core.host import normalize_host
from diffpane.core.types import FileDiff
from diffpane.sources.base import DiffSource, SourceContext

logger = logging.getLogger(__name__)


class RawUrlSource(DiffSource):
    """Any URL that serves plain unified-diff text (e.g. a pull request's .diff / .patch view)."""

    def name(self) -> str:
        return "raw"

    def fetch(self, ctx: SourceContext) -> List[FileDiff]:
        headers = {"Accept": "text/plain, text/x-diff, */*"}
        if ctx.token:
            headers["Authorization"] = f"Bearer {ctx.token}"

        with self._client(ctx) as client:
            r = client.get(ctx.link, headers=headers)
        if r.status_code in {401, 403}:
            raise AuthRequiredError("raw", normalize_host(ctx.link), f"Patch URL auth failed ({r.status_code}).")
        if r.status_code >= 400:
            raise SourceError(f"Patch URL returned {r.status_code}: {r.text[:500]}")

        files = split_file_diffs(r.text)
        logger.info("Fetched %d file diff(s) from %s", len(files), ctx.link)
        return files
