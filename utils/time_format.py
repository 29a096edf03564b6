"""
Time Formatting Utility

Converts the ISO-8601 UTC timestamps kept by the scrape loop into
human-readable local times for the dashboard.
"""

from datetime import datetime
import pytz


def format_local_time(iso_timestamp, timezone='UTC'):
    """
    Convert an ISO-8601 timestamp to local display format.

    Args:
        iso_timestamp (str or None): Timestamp such as "2025-03-16T08:30:00+00:00"
        timezone (str): pytz timezone name (default: 'UTC')

    Returns:
        str: Time like "2025-03-16 09:30:00 CET", or "Never" for None

    Raises:
        ValueError: If the timestamp or timezone cannot be parsed
    """
    if not iso_timestamp:
        return "Never"

    try:
        tz = pytz.timezone(timezone)
    except pytz.UnknownTimeZoneError as e:
        raise ValueError(f"Unknown timezone '{timezone}'") from e

    dt = datetime.fromisoformat(iso_timestamp)
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)

    return dt.astimezone(tz).strftime('%Y-%m-%d %H:%M:%S %Z')
