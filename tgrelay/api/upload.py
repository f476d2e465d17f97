from __future__ import annotations

import logging
import os
from typing import Any, Optional

from flask import Blueprint, jsonify, request

from tgrelay.api.common import (
    Relay,
    apply_cors,
    client_ip,
    error_response,
    file_path_key,
    get_relay,
    referer_header,
    request_origin,
)
from tgrelay.errors import ExtractionError, TelegramError
from tgrelay.media.extract import extract_uploaded_file
from tgrelay.media.models import RATING_FAILED, RATING_UNRATED, RatingRecord, UploadedFile
from tgrelay.media.routing import route_for_mime
from tgrelay.utils.time import now_time

upload_api = Blueprint("upload", __name__)


@upload_api.after_request
def _cors(response):
    return apply_cors(response, "POST, OPTIONS")


def record_rating(relay: Relay, uploaded: UploadedFile, referer: str, ip: str) -> None:
    """
    Post-response bookkeeping for an upload: rate the stored file and
    create its imginfo row. Runs as a deferred task.

    Without a rating service the file is never looked up and rates 0. A
    failed path lookup is recorded as -1; the row is written either way.
    """
    if relay.rating.api_url is None:
        rating = RATING_UNRATED
    else:
        try:
            file_path = relay.telegram.get_file_path(uploaded.file_id)
        except TelegramError as e:
            logging.warning("[RATING] no file path for %s: %s", uploaded.file_id, e)
            rating = RATING_FAILED
        else:
            rating = relay.rating.rate(relay.telegram.file_url(file_path))

    relay.store.insert_rating_record(
        RatingRecord(
            url=file_path_key(uploaded.file_id),
            referer=referer,
            ip=ip,
            rating=rating,
            time=now_time(),
        )
    )


def _stream_size(stream) -> Optional[int]:
    try:
        position = stream.tell()
        stream.seek(0, os.SEEK_END)
        size = stream.tell()
        stream.seek(position)
    except (AttributeError, OSError, ValueError):
        return None
    return size


@upload_api.route("/api/tgchannel", methods=["POST", "OPTIONS"])
def upload() -> Any:
    """
    Store one multipart file (field 'file') in the Telegram channel.

    Steps:
    1) validate the form before any outbound call
    2) route by MIME type and upload
    3) pull the file_id out of the reply
    4) answer the client, then rate + record in the background
    """
    if request.method == "OPTIONS":
        return "", 204

    relay = get_relay()

    try:
        # 1) Input
        upload_file = request.files.get("file")
        if upload_file is None:
            if "file" in request.form:
                return error_response(400, "Field 'file' must be a file upload.")
            return error_response(400, "No file provided.")
        if not upload_file.filename:
            return error_response(400, "Uploaded file has no name.")

        # 2) Send to Telegram
        route = route_for_mime(upload_file.mimetype)
        logging.info(
            "[TG UPLOAD] %s field=%s file=%s size=%s type=%s",
            route.endpoint,
            route.field,
            upload_file.filename,
            _stream_size(upload_file.stream) or "unknown",
            upload_file.mimetype,
        )

        try:
            reply = relay.telegram.send_file(
                route,
                upload_file.filename,
                upload_file.stream,
                upload_file.mimetype,
            )
            # 3) Identity
            uploaded = extract_uploaded_file(reply)
        except TelegramError as e:
            logging.error("[TG UPLOAD] failed: %s %s", e, e.response)
            return error_response(
                502,
                f"Failed to upload file to Telegram: {e}",
                telegram_response=e.response,
            )
        except ExtractionError as e:
            logging.error("[TG UPLOAD] could not read file id: %s", e)
            return error_response(500, f"Unexpected Telegram response: {e}")

        # 4) Bookkeeping happens after the response is on its way
        if relay.store is not None:
            relay.tasks.submit(
                f"record_rating {uploaded.file_id}",
                record_rating,
                relay,
                uploaded,
                referer_header(),
                client_ip(),
            )

        origin = request_origin(relay.settings)
        return jsonify(
            {
                "url": f"{origin}/api{file_path_key(uploaded.file_id)}",
                "code": 200,
                "name": uploaded.file_name,
            }
        )
    except Exception as e:  # noqa: BLE001
        logging.exception("[TG UPLOAD] unexpected error: %s", e)
        return error_response(500, str(e))
