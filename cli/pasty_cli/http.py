from __future__ import annotations

from importlib import metadata

from pasty_client import AuthenticatedClient, UnauthenticatedClient, connect
from pasty_client.config_types import ClientConfig

from .config import AppConfig, resolve_host


def cli_version() -> str:
    try:
        return metadata.version("pasty-cli")
    except Exception:
        return "0.0.0"


def make_client(
    cfg: AppConfig,
    *,
    host_override: str | None,
    token: str | None = None,
) -> UnauthenticatedClient | AuthenticatedClient:
    return connect(
        ClientConfig(
            host=resolve_host(cfg, host_override),
            token=token,
            client_version=cli_version(),
        )
    )
