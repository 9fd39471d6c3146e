from datetime import datetime
from typing import Optional

import pytz

UTC = pytz.UTC

RUN_TIME_FORMAT = "%a, %d %b %Y %H:%M:%S UTC"


def parse_utc_iso(value: str) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp as returned by the GitHub API
    (e.g. 2024-05-01T08:30:00Z) into an aware UTC datetime.
    """
    s = (value or "").strip()
    if not s:
        return None
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    if dt.tzinfo is None:
        return UTC.localize(dt)
    return dt.astimezone(UTC)


def format_utc(value: str) -> str:
    """
    Render a timestamp in a fixed, timezone-qualified format.
    Unparsable input is returned verbatim.
    """
    dt = parse_utc_iso(value)
    if dt is None:
        return value
    return dt.strftime(RUN_TIME_FORMAT)
