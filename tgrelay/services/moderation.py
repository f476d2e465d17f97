# tgrelay/services/moderation.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from tgrelay.config import Settings
from tgrelay.media.models import RATING_FAILED, RATING_UNRATED

MODERATE_CONTENT_URL = "https://api.moderatecontent.com/moderate/"


class RatingClient:
    """
    Content-safety scoring for a publicly reachable file URL.

    A custom RATING_API_URL takes precedence over the ModerateContent key.
    With neither configured every file gets the neutral rating 0.
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None) -> None:
        self.api_key = settings.moderation_api_key
        self.custom_url = settings.rating_api_url
        self.timeout = settings.http_timeout
        self.session = session if session is not None else requests.Session()

    @property
    def api_url(self) -> Optional[str]:
        if self.custom_url:
            return self.custom_url
        if self.api_key:
            return MODERATE_CONTENT_URL
        return None

    def _params(self, file_url: str) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if not self.custom_url and self.api_key:
            params["key"] = self.api_key
        params["url"] = file_url
        return params

    def rate(self, file_url: str) -> int:
        api_url = self.api_url
        if not api_url:
            return RATING_UNRATED

        try:
            resp = self.session.get(api_url, params=self._params(file_url), timeout=self.timeout)
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logging.warning("[RATING] lookup failed: %s", e)
            return RATING_FAILED

        if not isinstance(data, dict) or "rating_index" not in data:
            logging.warning("[RATING] reply has no rating_index: %s", data)
            return RATING_FAILED

        try:
            return int(data["rating_index"])
        except (TypeError, ValueError):
            logging.warning("[RATING] unusable rating_index: %r", data["rating_index"])
            return RATING_FAILED
