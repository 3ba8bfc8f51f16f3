# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common string, file name and date helpers used across the services.
# =============================================================================

import calendar
import random
import re
import string
from datetime import datetime, timezone
from typing import Any, Iterable


# =============================================================================
# Slugs
# =============================================================================

_SLUG_DISALLOWED = re.compile(r"[^a-z0-9äöüß ]", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")
_DASH_RUNS = re.compile(r"-+")


def create_slug(value: str) -> str:
    """
    Turn a title into a URL slug.

    German umlauts and ß are kept, everything else that is not a letter,
    digit or space is dropped.

    Example:
        create_slug("Hochzeit in den Alpen!")  # "hochzeit-in-den-alpen"
    """
    slug = value.lower().strip()
    slug = _SLUG_DISALLOWED.sub("", slug)
    slug = _WHITESPACE.sub("-", slug)
    slug = _DASH_RUNS.sub("-", slug)
    return slug.strip("-")


def sanitize_file_stem(value: str, allow_umlauts: bool = False) -> str:
    """
    Make a string safe for use in a storage object name.

    Disallowed characters become dashes; dash runs collapse.
    """
    allowed = "a-z0-9äöüß-" if allow_umlauts else "a-z0-9-"
    stem = re.sub(f"[^{allowed}]", "-", value.lower())
    stem = _DASH_RUNS.sub("-", stem)
    return stem.strip("-")


def split_filename(filename: str, default_ext: str = "webp") -> tuple[str, str]:
    """
    Split a file name into (stem, lowercased extension).

    Example:
        split_filename("Sunset.Final.JPG")  # ("Sunset.Final", "jpg")
        split_filename("noext")             # ("", "webp")
    """
    parts = filename.rsplit(".", 1)
    if len(parts) == 2 and parts[1]:
        return parts[0], parts[1].lower()
    return "", default_ext


def random_suffix(length: int = 6) -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "".join(random.choices(alphabet, k=length))


def compact_timestamp(now: datetime | None = None) -> str:
    """UTC timestamp with only digits, e.g. 20261016142530123."""
    now = now or datetime.now(timezone.utc)
    return now.strftime("%Y%m%d%H%M%S") + f"{now.microsecond // 1000:03d}"


def build_upload_path(folder: str, filename: str, fallback: str) -> str:
    """
    Build a collision-resistant storage path for an uploaded file.

    Format: <folder>/<stem>-<timestamp>-<random>.<ext>

    Example:
        build_upload_path("user-1", "My Photo.JPG", "gallery")
        # "user-1/my-photo-20261016142530123-k3j9x2.jpg"
    """
    stem, ext = split_filename(filename)
    safe_stem = sanitize_file_stem(stem) or fallback
    return f"{folder}/{safe_stem}-{compact_timestamp()}-{random_suffix()}.{ext}"


# =============================================================================
# Text Helpers
# =============================================================================

def normalize_multiline(text: str | None) -> list[str]:
    """Split textarea input into trimmed, non-empty lines."""
    if not text:
        return []
    return [line.strip() for line in text.split("\n") if line.strip()]


def sanitize_string_list(values: Iterable[Any] | None) -> list[str]:
    """Trim string entries and drop empty or non-string ones."""
    if not isinstance(values, (list, tuple)):
        return []
    return [value.strip() for value in values if isinstance(value, str) and value.strip()]


def clean_optional(value: str | None) -> str | None:
    """Trim a string; blank becomes None."""
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


# =============================================================================
# Dates
# =============================================================================

def subtract_months(value: datetime, months: int) -> datetime:
    """
    Move a datetime back by whole calendar months.

    The day is clamped to the length of the target month
    (31 March minus one month is 28/29 February).
    """
    month_index = value.year * 12 + (value.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO timestamp from Supabase; unparsable values give None."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
