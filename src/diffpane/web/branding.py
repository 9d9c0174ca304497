from __future__ import annotations

import os

DEFAULT_NAME = "diffpane"
DEFAULT_TAGLINE = "Unified diffs, inline or side by side"


def app_name() -> str:
    return os.environ.get("APP_NAME", DEFAULT_NAME).strip() or DEFAULT_NAME


def app_tagline() -> str:
    return os.environ.get("APP_TAGLINE", DEFAULT_TAGLINE).strip() or DEFAULT_TAGLINE
