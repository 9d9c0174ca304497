from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, Field

from diffpane.core.diff_service import DiffService
from diffpane.core.errors import AuthRequiredError, DiffPaneError
from diffpane.core.host import normalize_host
from diffpane.core.types import DisplayMode
from diffpane.storage.config import AppConfig, ConfigStore
from diffpane.web.branding import app_name, app_tagline


class DiffTextRequest(BaseModel):
    text: str = Field("", description="Unified diff text")
    per_file: bool = Field(False, description="Split multi-file diffs at 'diff --git' lines")


class FetchRequest(BaseModel):
    link: str = Field(..., description="GitHub pull request / commit URL, or a raw patch URL")
    mode: Optional[str] = Field(None, description="inline | side_by_side, or null for the configured default")


class SettingsUpsert(BaseModel):
    source: str  # github|raw
    host: str
    token: str


class SettingsDelete(BaseModel):
    source: str
    host: str


class DisplaySettings(BaseModel):
    mode: str = "inline"


def create_app(*, data_dir: Optional[Path] = None) -> FastAPI:
    # Behind a reverse proxy under a path prefix (e.g. /diff), set DIFFPANE_ROOT_PATH=/diff.
    root_path = (os.getenv("DIFFPANE_ROOT_PATH") or "").rstrip("/")
    app = FastAPI(title=app_name(), version="0.1.0", root_path=root_path)

    templates_dir = Path(__file__).parent / "templates"
    static_dir = Path(__file__).parent / "static"
    templates = Jinja2Templates(directory=str(templates_dir))
    app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    store = ConfigStore(data_dir=data_dir)

    def _load_text(payload: DiffTextRequest, mode: DisplayMode) -> Dict[str, Any]:
        service = DiffService.from_config(store.load())
        if payload.per_file:
            return {"mode": mode.value, "files": [f.to_dict(mode) for f in service.load_files(payload.text)]}
        return service.load(payload.text).to_dict(mode)

    def render_viewer(request: Request):
        return templates.TemplateResponse(
            request,
            "viewer.html",
            {
                "request": request,
                "app_name": app_name(),
                "app_tagline": app_tagline(),
                "default_mode": store.load().display_mode.value,
            },
        )

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    @app.get("/favicon.ico")
    def favicon(request: Request):
        return RedirectResponse(url=str(request.url_for("static", path="icon.svg")))

    @app.get("/", response_class=HTMLResponse)
    def viewer(request: Request):
        return render_viewer(request)

    @app.get("/index.html", response_class=HTMLResponse)
    def index_html(request: Request):
        # Gateway compatibility: serve the same page as "/"
        return render_viewer(request)

    @app.get("/api/settings")
    def get_settings():
        return _safe_settings(store.load())

    @app.post("/api/settings/token")
    def upsert_token(payload: SettingsUpsert):
        cfg = store.load()
        source = (payload.source or "").strip().lower()
        host = normalize_host(payload.host)
        if not host:
            raise HTTPException(status_code=400, detail={"error": "host is required"})
        cfg.tokens.setdefault(source, {})
        cfg.tokens[source][host] = payload.token
        store.save(cfg)
        return {"ok": True, "host": host}

    @app.post("/api/settings/token/delete")
    def delete_token(payload: SettingsDelete):
        cfg = store.load()
        source = (payload.source or "").strip().lower()
        host = normalize_host(payload.host)
        if host in (cfg.tokens.get(source) or {}):
            del cfg.tokens[source][host]
            if not cfg.tokens[source]:
                del cfg.tokens[source]
            store.save(cfg)
        return {"ok": True, "host": host}

    @app.post("/api/settings/display")
    def set_display(payload: DisplaySettings):
        try:
            mode = DisplayMode.parse(payload.mode)
        except ValueError as e:
            raise HTTPException(status_code=400, detail={"error": str(e)})
        cfg = store.load()
        cfg.display = {**(cfg.display or {}), "mode": mode.value}
        store.save(cfg)
        return {"ok": True, "mode": mode.value}

    @app.post("/api/diff/parse")
    def parse(payload: DiffTextRequest):
        return JSONResponse(_load_text(payload, DisplayMode.INLINE))

    @app.post("/api/diff/side-by-side")
    def side_by_side(payload: DiffTextRequest):
        return JSONResponse(_load_text(payload, DisplayMode.SIDE_BY_SIDE))

    @app.post("/api/diff/fetch")
    def fetch(payload: FetchRequest, request: Request):
        cfg = store.load()
        try:
            mode = DisplayMode.parse(payload.mode) if payload.mode else cfg.display_mode
            files = DiffService.from_config(cfg).fetch(payload.link)
            return JSONResponse({"link": payload.link, "mode": mode.value, "files": [f.to_dict(mode) for f in files]})
        except AuthRequiredError as e:
            raise HTTPException(
                status_code=401,
                detail={
                    "error": str(e),
                    "source": e.source,
                    "host": e.host,
                    "settings_url": str(request.url_for("get_settings")),
                },
            )
        except (DiffPaneError, ValueError) as e:
            raise HTTPException(status_code=400, detail={"error": str(e)})
        except Exception as e:
            raise HTTPException(status_code=500, detail={"error": f"Unexpected error: {e}"})

    return app


def _safe_settings(cfg: AppConfig) -> Dict[str, Any]:
    def mask(tok: str) -> str:
        if not tok:
            return ""
        if len(tok) <= 8:
            return "*" * len(tok)
        return "*" * (len(tok) - 4) + tok[-4:]

    tokens = {}
    for source, hosts in (cfg.tokens or {}).items():
        tokens[source] = {h: mask(t) for h, t in (hosts or {}).items()}

    return {"tokens": tokens, "display": {"mode": cfg.display_mode.value}}
