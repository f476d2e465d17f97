from dataclasses import asdict, dataclass
from typing import Any, Dict

# Rating values stored in imginfo.rating
RATING_FAILED = -1
RATING_UNRATED = 0
RATING_BLOCKED = 3


@dataclass(frozen=True)
class UploadedFile:
    """
    A file stored in the Telegram channel.

    Fields:
        file_id: Bot API file id, the public retrieval key.
        file_name: Original file name, or Telegram's file_unique_id when
            the attachment type carries no name (photos).
    """

    file_id: str
    file_name: str


@dataclass(frozen=True)
class AccessLogEntry:
    """One row of tgimglog: an untrusted retrieval."""

    url: str
    referer: str
    ip: str
    time: str

    def to_row(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RatingRecord:
    """
    One row of imginfo, keyed by retrieval path (e.g. '/cfile/<file_id>').

    rating: -1 lookup failed, 0 no rating service, 3 blocked,
    anything else is whatever the rating service returned.
    total: hit counter, starts at 1 and is only ever incremented in place.
    """

    url: str
    referer: str
    ip: str
    rating: int
    time: str
    total: int = 1

    def to_row(self) -> Dict[str, Any]:
        return asdict(self)
