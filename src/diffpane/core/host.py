from __future__ import annotations

from urllib.parse import urlparse


def normalize_host(value: str) -> str:
    """
    Reduce a user-provided host (or pasted URL) to a bare lowercase netloc.

    Examples:
    - "https://github.com" -> "github.com"
    - "ghe.example.com/org/repo" -> "ghe.example.com"
    - "GITHUB.COM" -> "github.com"
    """
    v = (value or "").strip()
    if not v:
        return ""
    if "://" in v:
        v = urlparse(v).netloc or ""
    return v.split("/", 1)[0].lower()
