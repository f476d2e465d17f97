from __future__ import annotations

import logging
import mimetypes
from typing import Any

from flask import Blueprint, Response, redirect, request

from tgrelay.api.common import (
    apply_cors,
    client_ip,
    error_response,
    file_path_key,
    get_relay,
    referer_header,
    request_origin,
)
from tgrelay.api.trust import is_trusted_referer
from tgrelay.errors import TelegramError
from tgrelay.media.models import RATING_BLOCKED, AccessLogEntry
from tgrelay.utils.time import now_time

files_api = Blueprint("files", __name__)


@files_api.after_request
def _cors(response):
    return apply_cors(response, "GET, POST, OPTIONS")


def file_response(content: bytes, file_name: str) -> Response:
    content_type = mimetypes.guess_type(file_name)[0] or "application/octet-stream"
    quoted_name = file_name.replace("\\", "\\\\").replace('"', '\\"')
    return Response(
        content,
        status=200,
        content_type=content_type,
        headers={"Content-Disposition": f"inline; filename=\"{quoted_name}\""},
    )


@files_api.route("/api/cfile/<file_id>", methods=["GET", "OPTIONS"])
def get_file(file_id: str) -> Any:
    """
    Serve a stored file by its Telegram file_id.

    Requests from our own pages (or any request when there is no store)
    get the bytes straight away. Everyone else is logged, and files rated
    as blocked are swapped for the placeholder image.
    """
    if request.method == "OPTIONS":
        return "", 204

    relay = get_relay()
    settings = relay.settings
    key = file_path_key(file_id)

    try:
        # 1) file_id -> temporary path
        try:
            file_path = relay.telegram.get_file_path(file_id)
        except TelegramError as e:
            return error_response(
                502,
                "Failed to get file path from Telegram API.",
                telegram_response=e.response,
            )

        # 2) Bytes
        try:
            upstream = relay.telegram.download(file_path)
        except TelegramError as e:
            return error_response(502, str(e))
        if not upstream.ok:
            return error_response(
                upstream.status_code,
                f"Failed to fetch file from Telegram API. Upstream returned: {upstream.text}",
            )

        file_name = file_path.split("/")[-1]
        origin = request_origin(settings)
        referer = request.headers.get("Referer")

        # 3) Trusted pages skip logging and rating
        if relay.store is None or is_trusted_referer(referer, origin, settings.trusted_paths):
            return file_response(upstream.content, file_name)

        # 4) Everyone else
        relay.tasks.submit(
            f"access_log {key}",
            relay.store.insert_access_log,
            AccessLogEntry(url=key, referer=referer_header(), ip=client_ip(), time=now_time()),
        )

        rating = relay.store.get_rating(key)
        if rating is not None:
            relay.tasks.submit(f"increment_total {key}", relay.store.increment_total, key)
            if rating == RATING_BLOCKED:
                logging.info("[RATING] blocked %s", key)
                return redirect(f"{origin}{settings.blocked_image_path}", 302)

        # No rating record is served like an unblocked one; uploads only
        # record ratings on a best-effort basis.
        return file_response(upstream.content, file_name)
    except Exception as e:  # noqa: BLE001
        logging.exception("[TG FILE] unexpected error for %s: %s", file_id, e)
        return error_response(500, f"Internal server error: {e}")
