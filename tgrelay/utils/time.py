from datetime import datetime
from typing import Optional

import pytz

UTC = pytz.UTC
SHANGHAI = pytz.timezone("Asia/Shanghai")

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def now_time(now: Optional[datetime] = None) -> str:
    """
    Returns the current time as 'YYYY-MM-DD HH:MM:SS' in UTC+8 (Asia/Shanghai).
    This is the only time format written to the store.

    A naive `now` is taken to be UTC.
    """
    if now is None:
        now = datetime.now(UTC)
    elif now.tzinfo is None:
        now = UTC.localize(now)
    return now.astimezone(SHANGHAI).strftime(TIME_FORMAT)
