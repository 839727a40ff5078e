"""
Canonical forms for event and booking fields.

These are pure functions of their input. Each one either returns the
normalized value or raises ``InvalidFormat`` naming the field.
"""
import re
from datetime import date, datetime, timezone

from devevent.core.exceptions import InvalidFormat

_NON_SLUG_CHARS = re.compile(r"[^A-Za-z0-9_\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")

_STRICT_TIME = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")
_LOOSE_TIME = re.compile(r"(\d{1,2}):(\d{2})", re.ASCII)

_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Written forms tried after ISO 8601; numeric dates are month-first.
DATE_FORMATS = (
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%m/%d/%Y",
    "%Y/%m/%d",
)

TIME_FORMAT_ERROR = "Invalid time format. Use HH:MM (24-hour format)"


def slugify(title: str) -> str:
    """Derive the URL-safe slug for an event title."""
    slug = title.lower().strip()
    slug = _NON_SLUG_CHARS.sub("", slug)
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


def _parse_date(text: str) -> date | None:
    iso_text = text[:-1] + "+00:00" if text[-1:] in ("Z", "z") else text
    try:
        parsed = datetime.fromisoformat(iso_text)
    except ValueError:
        pass
    else:
        if parsed.tzinfo is not None:
            try:
                parsed = parsed.astimezone(timezone.utc)
            except OverflowError:
                return None
        return parsed.date()

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def normalize_date(value: str) -> str:
    """Return the date as ``YYYY-MM-DD``."""
    parsed = _parse_date(value.strip())
    if parsed is None:
        raise InvalidFormat("date", "Invalid date format")
    return parsed.isoformat()


def normalize_time(value: str) -> str:
    """Return the time as zero-padded 24-hour ``HH:MM``."""
    text = value.strip()
    if _STRICT_TIME.match(text):
        return text

    match = _LOOSE_TIME.search(text)
    if not match:
        raise InvalidFormat("time", TIME_FORMAT_ERROR)

    hours, minutes = int(match.group(1)), int(match.group(2))
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise InvalidFormat("time", TIME_FORMAT_ERROR)
    return f"{hours:02d}:{minutes:02d}"


def normalize_email(value: str) -> str:
    email = value.strip().lower()
    if not _EMAIL.match(email):
        raise InvalidFormat("email", "Please provide a valid email address")
    return email
