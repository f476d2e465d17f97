from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional

from jsonschema import ValidationError, validate

from tgrelay.errors import ExtractionError, TelegramError
from tgrelay.media.models import UploadedFile

SCHEMA_DIR = os.path.join(os.path.dirname(__file__), "schemas")

# Single-object attachment keys in a Message, checked in this order
SINGLE_FILE_KEYS = ("video", "document", "audio", "animation", "voice")

_file_schema: Optional[Dict[str, Any]] = None


def load_file_schema() -> Dict[str, Any]:
    """
    Load (once) the JSON schema describing a Bot API file object.
    """
    global _file_schema
    if _file_schema is None:
        path = os.path.join(SCHEMA_DIR, "telegram_file.json")
        with open(path, "r", encoding="utf-8") as f:
            _file_schema = json.load(f)
    return _file_schema


def largest_photo(sizes: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Return the PhotoSize with the strictly largest file_size.
    On an exact tie the first one seen is kept.
    """
    if not sizes:
        raise ExtractionError("photo list is empty")

    best = sizes[0]
    for size in sizes[1:]:
        if (size.get("file_size") or 0) > (best.get("file_size") or 0):
            best = size
    return best


def _file_details(obj: Any) -> UploadedFile:
    try:
        validate(instance=obj, schema=load_file_schema())
    except ValidationError as e:
        raise ExtractionError(f"unexpected file object: {e.message}") from e

    return UploadedFile(
        file_id=obj["file_id"],
        file_name=obj.get("file_name") or obj.get("file_unique_id") or obj["file_id"],
    )


def extract_uploaded_file(response: Dict[str, Any]) -> UploadedFile:
    """
    Pull the stored file's identity out of a send* reply.

    - ok=false                → TelegramError (no extraction attempted)
    - result.photo            → largest size variant
    - result.video/document/… → the single object
    - anything else           → ExtractionError
    """
    if not isinstance(response, dict) or not response.get("ok"):
        description = response.get("description") if isinstance(response, dict) else None
        raise TelegramError(description or "Telegram rejected the upload", response)

    result = response.get("result")
    if not isinstance(result, dict):
        raise ExtractionError("reply has no result message")

    photo = result.get("photo")
    if photo is not None:
        if not isinstance(photo, list) or not all(isinstance(p, dict) for p in photo):
            raise ExtractionError("result.photo is not a list of sizes")
        return _file_details(largest_photo(photo))

    for key in SINGLE_FILE_KEYS:
        if key in result:
            return _file_details(result[key])

    raise ExtractionError("reply carries no known attachment")
