import uuid
import bleach
from datetime import datetime, timezone


def generate_id():
    return str(uuid.uuid4())


def utcnow():
    """Naive UTC timestamp, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_iso(dt):
    if dt is None:
        return None
    return dt.isoformat() + "Z"


def now_iso():
    return to_iso(utcnow())


def sanitize(text):
    """Sanitize user input to prevent XSS."""
    if text is None:
        return ""
    return bleach.clean(str(text).strip())


def normalize_email(email):
    return sanitize(email).lower()


def format_size(size):
    """Format a byte count for display, e.g. 153.4 KB."""
    return f"{size / 1024:.1f} KB"


def parse_day(day_str):
    """Parse a YYYY-MM-DD string. Returns a date or None."""
    try:
        return datetime.strptime(day_str, "%Y-%m-%d").date()
    except (ValueError, TypeError):
        return None
