from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import NoReturn

import typer
from pasty_client import ApiError, Metadata, PastyClientError, PfEncryption

from .. import console
from ..config import load_config_or_exit, resolve_token, save_config
from ..formatting import format_created, format_lifetime
from ..http import make_client


def _fail(action: str, exc: PastyClientError) -> NoReturn:
    console.err(f"Failed to {action}: {exc}")
    if isinstance(exc, ApiError):
        if exc.status_code in (401, 403):
            console.err("Unauthorized. Check the modification token (--token or PASTY_TOKEN).")
        elif exc.details:
            console.print(exc.details, markup=False)
    raise typer.Exit(code=2)


def _read_content(content: str | None, file: Path | None) -> str:
    if file is not None:
        try:
            return file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            console.err(f"Cannot read {file}: {e}")
            raise typer.Exit(code=2)
    if content is not None:
        return content
    if not sys.stdin.isatty():
        return sys.stdin.read()
    console.err("No content given. Pass CONTENT, --file, or pipe it on stdin.")
    raise typer.Exit(code=2)


def _metadata(alg: str | None, iv: str | None) -> Metadata | None:
    if alg is None and iv is None:
        return None
    if not alg or not iv:
        console.err("--alg and --iv must be given together.")
        raise typer.Exit(code=2)
    return Metadata(pf_encryption=PfEncryption(alg=alg, iv=iv))


def info(
        host: str | None = typer.Option(None, "--host", help="Override pasty host."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    """Show what the pasty instance supports."""
    cfg = load_config_or_exit()

    async def _run():
        async with make_client(cfg, host_override=host) as client:
            return await client.application_information()

    try:
        data = asyncio.run(_run())
    except PastyClientError as e:
        _fail("fetch application information", e)

    if json_out:
        console.print_json(data.model_dump(by_alias=True))
        return

    console.print(f"version: {data.version}")
    console.print(f"paste lifetime: {format_lifetime(data.paste_lifetime)}")
    console.print(f"modification tokens: {'yes' if data.modification_tokens else 'no'}")
    console.print(f"reports: {'yes' if data.reports else 'no'}")


def get_paste(
        paste_id: str = typer.Argument(..., help="Paste ID."),
        host: str | None = typer.Option(None, "--host", help="Override pasty host."),
        raw: bool = typer.Option(False, "--raw", help="Print content only."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    """Fetch a paste by ID."""
    cfg = load_config_or_exit()

    async def _run():
        async with make_client(cfg, host_override=host) as client:
            return await client.paste(paste_id)

    try:
        paste = asyncio.run(_run())
    except PastyClientError as e:
        _fail(f"fetch paste {paste_id}", e)

    if json_out:
        console.print_json(paste.model_dump(by_alias=True))
        return
    if raw:
        typer.echo(paste.content, nl=False)
        return

    console.print(f"id: {paste.id}")
    console.print(f"created: {format_created(paste.created)}")
    enc = paste.metadata.pf_encryption if paste.metadata else None
    if enc is not None:
        console.print(f"encryption: {enc.alg} (iv={enc.iv})", markup=False)
    console.rule()
    console.print(paste.content, markup=False, highlight=False)


def create_paste(
        content: str | None = typer.Argument(None, help="Paste content (default: stdin)."),
        file: Path | None = typer.Option(None, "--file", "-f", exists=True, dir_okay=False, help="Read content from file."),
        alg: str | None = typer.Option(None, "--alg", help="Encryption algorithm stored in metadata."),
        iv: str | None = typer.Option(None, "--iv", help="Encryption IV stored in metadata."),
        no_save: bool = typer.Option(False, "--no-save", help="Do not store the modification token locally."),
        host: str | None = typer.Option(None, "--host", help="Override pasty host."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    """Create a paste and keep its modification token."""
    body = _read_content(content, file)
    metadata = _metadata(alg, iv)
    cfg = load_config_or_exit()

    async def _run():
        async with make_client(cfg, host_override=host) as client:
            return await client.create_paste(body, metadata)

    try:
        created = asyncio.run(_run())
    except PastyClientError as e:
        _fail("create paste", e)

    # print before saving; the server never returns this token again
    if json_out:
        console.print_json(created.to_flat())
    else:
        console.ok(f"Paste created: id={created.paste.id}")
        console.print(f"modification token: {created.modification_token}", markup=False)

    if no_save:
        if not json_out:
            console.warn("Token was not saved; it cannot be retrieved again.")
        return

    cfg.tokens[created.paste.id] = created.modification_token
    try:
        saved = save_config(cfg)
    except OSError as e:
        console.warn(f"Token was not saved ({e}); keep the token printed above.")
        return
    if not json_out:
        console.info(f"Token saved to {saved}")


def update_paste(
        paste_id: str = typer.Argument(..., help="Paste ID."),
        content: str | None = typer.Argument(None, help="New content (default: stdin)."),
        file: Path | None = typer.Option(None, "--file", "-f", exists=True, dir_okay=False, help="Read content from file."),
        alg: str | None = typer.Option(None, "--alg", help="Encryption algorithm stored in metadata."),
        iv: str | None = typer.Option(None, "--iv", help="Encryption IV stored in metadata."),
        token: str | None = typer.Option(None, "--token", help="Modification or admin token."),
        host: str | None = typer.Option(None, "--host", help="Override pasty host."),
):
    """Replace the content of a paste."""
    cfg = load_config_or_exit()
    tok = resolve_token(cfg, paste_id, token)
    if not tok:
        console.err(f"No token for paste {paste_id}. Pass --token or set PASTY_TOKEN.")
        raise typer.Exit(code=2)
    body = _read_content(content, file)
    metadata = _metadata(alg, iv)

    async def _run():
        async with make_client(cfg, host_override=host, token=tok) as client:
            await client.update_paste(paste_id, body, metadata)

    try:
        asyncio.run(_run())
    except PastyClientError as e:
        _fail(f"update paste {paste_id}", e)

    console.ok(f"Paste updated: id={paste_id}")


def delete_paste(
        paste_id: str = typer.Argument(..., help="Paste ID."),
        token: str | None = typer.Option(None, "--token", help="Modification or admin token."),
        yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
        host: str | None = typer.Option(None, "--host", help="Override pasty host."),
):
    """Delete a paste and forget its saved token."""
    cfg = load_config_or_exit()
    tok = resolve_token(cfg, paste_id, token)
    if not tok:
        console.err(f"No token for paste {paste_id}. Pass --token or set PASTY_TOKEN.")
        raise typer.Exit(code=2)
    if not yes and not typer.confirm(f"Delete paste {paste_id}?", default=False):
        raise typer.Exit(code=0)

    async def _run():
        async with make_client(cfg, host_override=host, token=tok) as client:
            await client.delete_paste(paste_id)

    try:
        asyncio.run(_run())
    except PastyClientError as e:
        _fail(f"delete paste {paste_id}", e)

    console.ok(f"Paste deleted: id={paste_id}")
    if cfg.tokens.pop(paste_id, None) is not None:
        try:
            save_config(cfg)
        except OSError as e:
            console.warn(f"Saved token for {paste_id} was not removed: {e}")
