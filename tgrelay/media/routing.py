from __future__ import annotations

from typing import NamedTuple, Optional, Tuple


class Route(NamedTuple):
    endpoint: str
    field: str


DOCUMENT_ROUTE = Route("sendDocument", "document")

# Checked in order; the first matching prefix wins.
PREFIX_ROUTES: Tuple[Tuple[str, Route], ...] = (
    ("image/", Route("sendPhoto", "photo")),
    ("video/", Route("sendVideo", "video")),
    ("audio/", Route("sendAudio", "audio")),
)


def route_for_mime(mime_type: Optional[str]) -> Route:
    """
    Pick the Bot API send endpoint and multipart field for a MIME type.

    Anything that is not image/*, video/* or audio/* goes out as a
    document, including PDFs and missing or empty types.
    """
    value = (mime_type or "").strip().lower()
    for prefix, route in PREFIX_ROUTES:
        if value.startswith(prefix):
            return route
    return DOCUMENT_ROUTE
