from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional
from urllib.parse import urlsplit

from dotenv import load_dotenv

DEFAULT_API_TIMEOUT = 20.0


@dataclass(frozen=True)
class Settings:
    discord_token: str
    pal_api_url: str
    log_level: str = "INFO"
    api_timeout: float = DEFAULT_API_TIMEOUT
    command_prefix: str = "!"
    healthcheck_port: Optional[int] = None


def _required(env: Mapping[str, str], name: str) -> str:
    value = (env.get(name) or "").strip()
    if not value:
        raise RuntimeError(f"{name} not set.")
    return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from ``env`` (default: ``.env`` + process environment).

    Environment variables:
      - DISCORD_TOKEN (required): bot token.
      - PAL_API_URL (required): base URL of the Pal API.
      - LOG_LEVEL: root log level, INFO by default.
      - PAL_API_TIMEOUT: per-request timeout in seconds.
      - COMMAND_PREFIX: prefix for text commands such as !register.
      - HEALTHCHECK_PORT: start the healthcheck server on this port when set.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    token = _required(env, "DISCORD_TOKEN")
    api_url = _required(env, "PAL_API_URL")
    parts = urlsplit(api_url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise RuntimeError(f"PAL_API_URL is not a valid http(s) URL: {api_url!r}")

    raw_timeout = (env.get("PAL_API_TIMEOUT") or "").strip()
    try:
        timeout = float(raw_timeout) if raw_timeout else DEFAULT_API_TIMEOUT
    except ValueError:
        raise RuntimeError(f"PAL_API_TIMEOUT must be a number, got {raw_timeout!r}")
    if timeout <= 0:
        raise RuntimeError("PAL_API_TIMEOUT must be positive.")

    raw_port = (env.get("HEALTHCHECK_PORT") or "").strip()
    try:
        port = int(raw_port) if raw_port else None
    except ValueError:
        raise RuntimeError(f"HEALTHCHECK_PORT must be an integer, got {raw_port!r}")

    return Settings(
        discord_token=token,
        pal_api_url=api_url,
        log_level=(env.get("LOG_LEVEL") or "INFO").strip().upper(),
        api_timeout=timeout,
        command_prefix=(env.get("COMMAND_PREFIX") or "!").strip() or "!",
        healthcheck_port=port,
    )
