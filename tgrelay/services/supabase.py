import logging
from typing import Optional

from supabase import Client, create_client

from tgrelay.config import Settings
from tgrelay.media.models import AccessLogEntry, RatingRecord

ACCESS_LOG_TABLE = "tgimglog"
RATING_TABLE = "imginfo"
INCREMENT_TOTAL_FN = "imginfo_increment_total"


class RatingStore:
    """
    Access log and per-URL rating cache, kept in two Supabase tables.

    Writes raise on failure; handlers only ever run them as deferred tasks,
    where the failure is logged and dropped.
    """

    def __init__(self, client: Client) -> None:
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> Optional["RatingStore"]:
        """
        Returns None when no Supabase credentials are configured.
        """
        if not settings.store_enabled:
            return None
        return cls(create_client(settings.supabase_url, settings.supabase_key))

    # ================================
    # WRITES
    # ================================
    def insert_access_log(self, entry: AccessLogEntry) -> None:
        self.client.table(ACCESS_LOG_TABLE).insert(entry.to_row()).execute()

    def insert_rating_record(self, record: RatingRecord) -> None:
        self.client.table(RATING_TABLE).insert(record.to_row()).execute()
        logging.info("[STORE] rating %s recorded for %s", record.rating, record.url)

    def increment_total(self, url: str) -> None:
        """
        Bump imginfo.total for one url in a single UPDATE (see schema.sql).
        Missing rows are left alone.
        """
        self.client.rpc(INCREMENT_TOTAL_FN, {"target_url": url}).execute()

    # ================================
    # READS
    # ================================
    def get_rating(self, url: str) -> Optional[int]:
        """
        Return the cached rating for a retrieval path.
        Returns None if there is no record, or the lookup itself failed.
        """
        try:
            response = (
                self.client.table(RATING_TABLE)
                .select("rating")
                .eq("url", url)
                .limit(1)
                .execute()
            )
        except Exception as e:  # noqa: BLE001
            logging.error("[STORE] rating lookup failed for %s: %s", url, e)
            return None

        rows = response.data or []
        if not rows:
            return None
        return rows[0].get("rating")
