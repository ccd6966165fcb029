from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from typing import Any

import tomli_w
import typer
from platformdirs import user_config_dir

from . import console

APP_NAME = "pasty"
CONFIG_FILENAME = "config.toml"
HOST_DEFAULT = "https://pasty.lus.pm"
ENV_HOST = "PASTY_HOST"
ENV_TOKEN = "PASTY_TOKEN"

_LOCAL_HOSTS = {"localhost", "127.0.0.1", "0.0.0.0"}


@dataclass
class AppConfig:
    host: str
    # paste id -> modification token
    tokens: dict[str, str] = field(default_factory=dict)


def config_path() -> str:
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_config() -> AppConfig:
    return AppConfig(host=HOST_DEFAULT, tokens={})


def normalize_host(raw: str | None) -> str:
    value = (raw or "").strip()
    if not value:
        return ""
    value = value.rstrip("/")
    lowered = value.lower()
    if lowered.startswith("http://") or lowered.startswith("https://"):
        return value

    host = value.split("/", 1)[0]
    host = host.split(":", 1)[0].lower()
    scheme = "http://" if host in _LOCAL_HOSTS else "https://"
    return f"{scheme}{value}"


def ensure_parent_dir(path: str) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)


def to_toml(cfg: AppConfig) -> dict[str, Any]:
    return {
        "host": cfg.host,
        "tokens": dict(cfg.tokens),
    }


def from_toml(data: dict[str, Any]) -> AppConfig:
    host = normalize_host(str(data.get("host") or ""))
    tokens_raw = data.get("tokens") or {}
    tokens: dict[str, str] = {}
    if isinstance(tokens_raw, dict):
        for paste_id, token in tokens_raw.items():
            if isinstance(token, str) and token:
                tokens[str(paste_id)] = token
    return AppConfig(host=host or HOST_DEFAULT, tokens=tokens)


class ConfigError(Exception):
    """Settings file exists but cannot be read."""


def load_config() -> AppConfig:
    path = config_path()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return default_config()
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"cannot read {path}: {e}") from e
    return from_toml(data)


def load_config_or_exit() -> AppConfig:
    try:
        return load_config()
    except ConfigError as e:
        console.err(str(e))
        raise typer.Exit(code=2)


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    ensure_parent_dir(path)
    # modification tokens live here
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "wb") as f:
        f.write(tomli_w.dumps(to_toml(cfg)).encode("utf-8"))
    # the mode argument only applies to new files
    os.chmod(path, 0o600)
    return path


def resolve_host(cfg: AppConfig, override: str | None = None) -> str:
    if override:
        return normalize_host(override)
    env_value = os.getenv(ENV_HOST, "").strip()
    if env_value:
        return normalize_host(env_value)
    return cfg.host or HOST_DEFAULT


def resolve_token(cfg: AppConfig, paste_id: str, override: str | None = None) -> str | None:
    if override:
        return override
    env_value = os.getenv(ENV_TOKEN, "").strip()
    if env_value:
        return env_value
    return cfg.tokens.get(paste_id)
