"""Time utilities."""
from datetime import datetime


def format_duration(seconds: int) -> str:
    """Format elapsed seconds as MM:SS (minutes keep growing past 59)."""
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


def parse_iso_timestamp(value: object) -> datetime | None:
    """Parse ISO timestamp string to datetime."""
    if not isinstance(value, str):
        return None
    raw = value.strip()
    if not raw:
        return None
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        return None


def format_timestamp(value: object, with_month_name: bool = False) -> str | None:
    """Format a backend timestamp for display, e.g. 'Mar 05, 2025 02:30 PM'."""
    parsed = parse_iso_timestamp(value)
    if parsed is None:
        return None
    month = "%B" if with_month_name else "%b"
    return parsed.strftime(f"{month} %d, %Y %I:%M %p")
