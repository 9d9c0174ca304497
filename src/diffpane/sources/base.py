from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

import httpx

from diffpane.core.types import FileDiff


@dataclass(frozen=True)
class SourceContext:
    link: str
    token: Optional[str]
    timeout_s: float = 30.0


class DiffSource(ABC):
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def fetch(self, ctx: SourceContext) -> List[FileDiff]: ...

    def _client(self, ctx: SourceContext) -> httpx.Client:
        return httpx.Client(timeout=ctx.timeout_s, follow_redirects=True)
