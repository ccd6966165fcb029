from __future__ import annotations

import typer

from .. import console
from ..config import load_config_or_exit, normalize_host, save_config

app = typer.Typer(help="Manage local CLI settings (~/.config/pasty/config.toml).")


@app.command("show")
def show_settings():
    cfg = load_config_or_exit()
    console.console.print(f"host={cfg.host} saved_tokens={len(cfg.tokens)}")


@app.command("get")
def get_setting(
        key: str = typer.Argument(..., help="Setting key (host)."),
):
    cfg = load_config_or_exit()
    k = key.strip().lower()
    if k == "host":
        console.console.print(cfg.host)
        return
    console.err(f"Unknown setting: {key}")
    raise typer.Exit(code=2)


@app.command("set")
def set_setting(
        host: str | None = typer.Option(None, "--host", help="Set pasty host URL."),
):
    cfg = load_config_or_exit()
    if host is not None:
        value = normalize_host(host)
        if not value:
            console.err("Host cannot be empty.")
            raise typer.Exit(code=2)
        cfg.host = value
    saved = save_config(cfg)
    console.ok(f"Settings updated: {saved}")
