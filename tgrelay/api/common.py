# tgrelay/api/common.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from flask import Response, current_app, jsonify, request

from tgrelay.config import Settings
from tgrelay.services.moderation import RatingClient
from tgrelay.services.supabase import RatingStore
from tgrelay.services.telegram import TelegramClient
from tgrelay.tasks import DeferredTasks

# Retrieval paths look like /cfile/<file_id>; public URLs add the /api prefix
FILE_PREFIX = "/cfile"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Max-Age": "86400",
}


@dataclass
class Relay:
    """Collaborators shared by every handler, built once in create_app()."""

    settings: Settings
    telegram: TelegramClient
    rating: RatingClient
    store: Optional[RatingStore]
    tasks: DeferredTasks


def get_relay() -> Relay:
    return current_app.extensions["relay"]


def file_path_key(file_id: str) -> str:
    return f"{FILE_PREFIX}/{file_id}"


def request_origin(settings: Settings) -> str:
    if settings.public_base_url:
        return settings.public_base_url
    return request.host_url.rstrip("/")


def client_ip() -> str:
    ip = (
        request.headers.get("X-Forwarded-For")
        or request.headers.get("X-Real-IP")
        or request.remote_addr
    )
    return ip.split(",")[0].strip() if ip else "IP not found"


def referer_header() -> str:
    return request.headers.get("Referer") or "Referer not found"


def error_response(status: int, message: str, **extra: Any) -> Tuple[Response, int]:
    body: Dict[str, Any] = {"status": status, "message": message, "success": False}
    body.update(extra)
    return jsonify(body), status


def apply_cors(response: Response, methods: str) -> Response:
    for key, value in CORS_HEADERS.items():
        response.headers[key] = value
    response.headers["Access-Control-Allow-Methods"] = methods
    return response
