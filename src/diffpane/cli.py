from __future__ import annotations

import json
import logging
import socket
import sys
import webbrowser
from pathlib import Path
from typing import List, Optional

import typer
import uvicorn
from rich.console import Console
from rich.logging import RichHandler

from diffpane.core.diff_service import DiffService
from diffpane.core.errors import AuthRequiredError, DiffPaneError
from diffpane.core.types import DisplayMode, ParsedDiff
from diffpane.render.console import render, render_title
from diffpane.storage.config import ConfigStore
from diffpane.web.app import create_app

app = typer.Typer(add_completion=False, help="diffpane - inline and side-by-side unified diff viewer.")
console = Console()
err_console = Console(stderr=True)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _pick_port(preferred: int) -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.settimeout(0.2)
        if s.connect_ex(("127.0.0.1", preferred)) != 0:
            return preferred
    # fallback: ask OS for free port
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return int(s.getsockname()[1])


def _resolve_mode(mode: Optional[str], store: ConfigStore) -> DisplayMode:
    if not mode:
        return store.load().display_mode
    try:
        return DisplayMode.parse(mode)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--mode")


def _emit(files: List[ParsedDiff], mode: DisplayMode, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps({"files": [f.to_dict(mode) for f in files]}, indent=2))
        return
    if not files:
        console.print("[dim]No changes.[/dim]")
        return
    for parsed in files:
        console.rule(render_title(parsed))
        console.print(render(parsed, mode))


@app.command()
def show(
    path: str = typer.Argument(..., help="Diff/patch file, or '-' to read stdin"),
    mode: Optional[str] = typer.Option(None, help="inline | side_by_side (defaults to the configured mode)"),
    as_json: bool = typer.Option(False, "--json", help="Print parsed lines as JSON"),
    per_file: bool = typer.Option(True, "--per-file/--whole", help="Split multi-file diffs at 'diff --git' lines"),
    data_dir: Optional[Path] = typer.Option(None, help="Config dir (defaults to ~/.diffpane)"),
):
    """Render a local diff file (or stdin)."""
    store = ConfigStore(data_dir=data_dir)
    display = _resolve_mode(mode, store)

    if path == "-":
        text = sys.stdin.read()
    else:
        p = Path(path)
        if not p.is_file():
            err_console.print(f"[red]File not found:[/red] {path}")
            raise typer.Exit(code=1)
        text = p.read_text(encoding="utf-8", errors="replace")

    service = DiffService.from_config(store.load())
    files = service.load_files(text) if per_file else [service.load(text)]
    _emit(files, display, as_json)


@app.command()
def fetch(
    link: str = typer.Argument(..., help="GitHub pull request / commit URL, or a raw .diff/.patch URL"),
    mode: Optional[str] = typer.Option(None, help="inline | side_by_side (defaults to the configured mode)"),
    as_json: bool = typer.Option(False, "--json", help="Print parsed lines as JSON"),
    data_dir: Optional[Path] = typer.Option(None, help="Config dir (defaults to ~/.diffpane)"),
):
    """Fetch a remote diff and render it."""
    store = ConfigStore(data_dir=data_dir)
    display = _resolve_mode(mode, store)
    service = DiffService.from_config(store.load())
    try:
        files = service.fetch(link)
    except AuthRequiredError as e:
        err_console.print(f"[red]{e}[/red] Add a {e.source} token for [bold]{e.host}[/bold] in Settings.")
        raise typer.Exit(code=1)
    except (DiffPaneError, ValueError) as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)
    _emit(files, display, as_json)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind host"),
    port: int = typer.Option(8766, help="Bind port (auto-fallback if busy)"),
    open_browser: bool = typer.Option(True, "--open/--no-open", help="Open browser"),
    data_dir: Optional[Path] = typer.Option(None, help="Config dir (defaults to ~/.diffpane)"),
):
    """Start the local web viewer."""
    chosen_port = _pick_port(port)
    url = f"http://{host}:{chosen_port}"
    if open_browser:
        webbrowser.open(url, new=2)

    console.print(f"[bold]diffpane[/bold] running at {url}")
    uvicorn.run(
        create_app(data_dir=data_dir),
        host=host,
        port=chosen_port,
        log_level="info",
    )
