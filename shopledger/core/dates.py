import re
from datetime import date, datetime, timezone

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def normalize_date(value):
    """Return ``value`` as a zero-padded ``YYYY-MM-DD`` string, or None."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        value_text = value.strip()
        if not value_text or not _ISO_DATE_RE.match(value_text):
            return None
        try:
            return date.fromisoformat(value_text).isoformat()
        except ValueError:
            return None
    return None


def month_prefix(year: int, month: int) -> str:
    # Months outside 1..12 still produce a prefix; it simply matches nothing.
    return "{:04d}-{:02d}".format(int(year), int(month))


def today_iso() -> str:
    return date.today().isoformat()


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def in_range(value: str, start_date=None, end_date=None) -> bool:
    if start_date and value < start_date:
        return False
    if end_date and value > end_date:
        return False
    return True
