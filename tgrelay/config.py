# tgrelay/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from tgrelay.errors import ConfigError

DEFAULT_TRUSTED_PATHS = ("/", "/admin", "/list")
DEFAULT_TELEGRAM_API_BASE = "https://api.telegram.org"


def _optional(environ: Mapping[str, str], name: str) -> Optional[str]:
    value = (environ.get(name) or "").strip()
    return value or None


def _required(environ: Mapping[str, str], name: str) -> str:
    value = _optional(environ, name)
    if value is None:
        raise ConfigError(f"{name} is not set")
    return value


def _number(environ: Mapping[str, str], name: str, default, cast):
    raw = _optional(environ, name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


def _paths(raw: Optional[str]) -> Tuple[str, ...]:
    if raw is None:
        return DEFAULT_TRUSTED_PATHS
    paths = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        if not part.startswith("/"):
            part = "/" + part
        paths.append(part)
    return tuple(paths)


@dataclass(frozen=True)
class Settings:
    """
    Everything the relay needs to know, read once at startup.

    The store is optional: without Supabase credentials there is no
    access log and no rating gate, and every retrieval is served directly.
    Rating is optional too: without an API key or a custom rating URL,
    uploads are recorded with the neutral rating 0.
    """

    bot_token: str
    channel_id: str

    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None

    moderation_api_key: Optional[str] = None
    rating_api_url: Optional[str] = None

    trusted_paths: Tuple[str, ...] = field(default=DEFAULT_TRUSTED_PATHS)
    public_base_url: Optional[str] = None
    blocked_image_path: str = "/img/blocked.png"

    telegram_api_base: str = DEFAULT_TELEGRAM_API_BASE
    http_timeout: float = 60.0
    task_workers: int = 4
    log_level: str = "INFO"

    @property
    def store_enabled(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        public_base_url = _optional(env, "PUBLIC_BASE_URL")
        if public_base_url:
            public_base_url = public_base_url.rstrip("/")

        return cls(
            bot_token=_required(env, "TG_BOT_TOKEN"),
            channel_id=_required(env, "TG_CHAT_ID"),
            supabase_url=_optional(env, "SUPABASE_URL"),
            supabase_key=_optional(env, "SUPABASE_ANON_KEY"),
            moderation_api_key=_optional(env, "MODERATE_CONTENT_API_KEY"),
            rating_api_url=_optional(env, "RATING_API_URL"),
            trusted_paths=_paths(_optional(env, "TRUSTED_PATHS")),
            public_base_url=public_base_url,
            blocked_image_path=_optional(env, "BLOCKED_IMAGE_PATH") or "/img/blocked.png",
            telegram_api_base=(_optional(env, "TG_API_BASE") or DEFAULT_TELEGRAM_API_BASE).rstrip("/"),
            http_timeout=_number(env, "HTTP_TIMEOUT", 60.0, float),
            task_workers=_number(env, "TASK_WORKERS", 4, int),
            log_level=(_optional(env, "LOG_LEVEL") or "INFO").upper(),
        )
