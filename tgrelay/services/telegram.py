# tgrelay/services/telegram.py
from __future__ import annotations

import logging
from typing import IO, Any, Dict, Optional

import requests

from tgrelay.config import Settings
from tgrelay.errors import TelegramError
from tgrelay.media.routing import Route

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
)


class TelegramClient:
    """
    The small slice of the Bot API the relay needs: push a file into the
    channel, turn a file_id into a download path, and fetch the bytes.
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None) -> None:
        self.channel_id = settings.channel_id
        self.timeout = settings.http_timeout
        self._api_base = f"{settings.telegram_api_base}/bot{settings.bot_token}"
        self._file_base = f"{settings.telegram_api_base}/file/bot{settings.bot_token}"

        self.session = session if session is not None else requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    def _decode(self, resp: requests.Response, endpoint: str) -> Dict[str, Any]:
        try:
            return resp.json()
        except ValueError as e:
            raise TelegramError(
                f"{endpoint} returned a non-JSON body (HTTP {resp.status_code})"
            ) from e

    def send_file(
        self,
        route: Route,
        filename: str,
        stream: IO[bytes],
        mime_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Upload one attachment to the channel via route.endpoint.

        Returns the decoded reply, including ok=false replies; the caller
        decides what a rejected upload means. Transport failures raise.
        """
        url = f"{self._api_base}/{route.endpoint}"
        files = {route.field: (filename, stream, mime_type or "application/octet-stream")}
        try:
            resp = self.session.post(
                url,
                data={"chat_id": self.channel_id},
                files=files,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TelegramError(f"{route.endpoint} request failed: {e}") from e

        return self._decode(resp, route.endpoint)

    def get_file_path(self, file_id: str) -> str:
        """
        Resolve a file_id to the temporary path used by the file download host.
        """
        try:
            resp = self.session.get(
                f"{self._api_base}/getFile",
                params={"file_id": file_id},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logging.error("[TG GETFILE] request failed for %s: %s", file_id, e)
            raise TelegramError(f"getFile request failed: {e}") from e

        data = self._decode(resp, "getFile")
        file_path = (data.get("result") or {}).get("file_path") if data.get("ok") else None
        if not file_path:
            logging.error(
                "[TG GETFILE] failed for %s: %s",
                file_id,
                data.get("description") or "Unknown error",
            )
            raise TelegramError("Failed to get file path from Telegram API", data)
        return file_path

    def file_url(self, file_path: str) -> str:
        return f"{self._file_base}/{file_path}"

    def download(self, file_path: str) -> requests.Response:
        """
        Fetch the bytes behind a resolved file path. The response is returned
        whatever its status; transport failures raise TelegramError.
        """
        try:
            return self.session.get(self.file_url(file_path), timeout=self.timeout)
        except requests.RequestException as e:
            raise TelegramError(f"file download failed: {e}") from e
