from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from diffpane.core.host import normalize_host
from diffpane.core.types import DisplayMode


def default_data_dir() -> Path:
    return Path.home() / ".diffpane"


@dataclass
class AppConfig:
    # access tokens keyed by source ("github" | "raw") + host
    tokens: Dict[str, Dict[str, str]] = field(default_factory=dict)
    # viewer preferences, e.g. {"mode": "side_by_side"}
    display: Dict[str, Any] = field(default_factory=dict)

    @property
    def display_mode(self) -> DisplayMode:
        return DisplayMode.parse((self.display or {}).get("mode"), default=DisplayMode.INLINE)

    def token_for(self, source: str, host: str) -> Optional[str]:
        return (self.tokens.get(source, {}) or {}).get(normalize_host(host))


class ConfigStore:
    def __init__(self, data_dir: Optional[Path] = None):
        self.data_dir = data_dir or default_data_dir()
        self.path = self.data_dir / "config.json"

    def load(self) -> AppConfig:
        if not self.path.exists():
            return AppConfig()
        data = json.loads(self.path.read_text(encoding="utf-8"))
        cfg = AppConfig(
            tokens=data.get("tokens", {}) or {},
            display=data.get("display", {}) or {},
        )
        migrated_tokens = _migrate_tokens(cfg.tokens)
        migrated_display = _migrate_display(cfg.display)
        if migrated_tokens is not None:
            cfg.tokens = migrated_tokens
        if migrated_display is not None:
            cfg.display = migrated_display
        if migrated_tokens is not None or migrated_display is not None:
            self.save(cfg)
        return cfg

    def save(self, cfg: AppConfig) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".json.tmp")
        tmp.write_text(
            json.dumps({"tokens": cfg.tokens, "display": cfg.display}, indent=2, sort_keys=True),
            encoding="utf-8",
        )
        os.replace(tmp, self.path)
        try:
            os.chmod(self.path, 0o600)
        except OSError:
            # best-effort on platforms without POSIX permissions
            pass


def _migrate_tokens(tokens: Dict[str, Dict[str, str]]) -> Optional[Dict[str, Dict[str, str]]]:
    """
    Normalize source + host keys so a pasted "https://github.com/" and "github.com" share one entry.
    On collision the key that was already canonical wins. Returns None when nothing changed.
    """
    if not tokens:
        return None

    changed = False
    out: Dict[str, Dict[str, str]] = {}
    for source_key, hosts in tokens.items():
        source = (source_key or "").strip().lower()
        changed = changed or source != source_key

        merged: Dict[str, str] = {}
        canonical: Dict[str, bool] = {}
        for host_key, tok in (hosts or {}).items():
            host = normalize_host(host_key)
            is_canonical = host == host_key
            changed = changed or not is_canonical
            if not host:
                continue
            if host not in merged or (is_canonical and not canonical[host]):
                merged[host] = tok
                canonical[host] = is_canonical

        if merged:
            out.setdefault(source, {}).update(merged)
        else:
            changed = True

    return out if changed else None


def _migrate_display(display: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if not display or "mode" not in display:
        return None
    mode = DisplayMode.parse(display.get("mode"), default=DisplayMode.INLINE).value
    if mode == display.get("mode"):
        return None
    out = dict(display)
    out["mode"] = mode
    return out
