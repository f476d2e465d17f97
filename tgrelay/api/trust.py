from __future__ import annotations

from typing import Iterable, Optional
from urllib.parse import urlsplit


def _normalize_path(path: str) -> str:
    path = path.rstrip("/")
    return path or "/"


def _origin(url: str) -> str:
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}".lower()


def is_trusted_referer(
    referer: Optional[str],
    origin: str,
    trusted_paths: Iterable[str],
) -> bool:
    """
    True when the Referer is one of our own pages.

    The Referer must share scheme and host with `origin`, and its path must
    equal a trusted path or sit below one: '/admin' also trusts
    '/admin/files', while '/' only ever trusts the root page itself.
    """
    if not referer:
        return False

    parts = urlsplit(referer)
    if not parts.scheme or not parts.netloc:
        return False
    if _origin(referer) != _origin(origin):
        return False

    path = _normalize_path(parts.path)
    for trusted in trusted_paths:
        trusted = _normalize_path(trusted)
        if path == trusted:
            return True
        if trusted != "/" and path.startswith(trusted + "/"):
            return True
    return False
