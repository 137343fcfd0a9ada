"""Utility functions for Inkwell.

Key functions:
    escape_html: Escape special HTML characters in a string.
    join_root_url: Join a base URL with a path.
    to_utc: Normalize a date-like value to an aware UTC datetime.
    format_iso_instant: Machine-readable timestamp for ``datetime`` attributes.
    format_readable_date: Human-readable "Month D, YYYY" date.
    ensure_dir: Create a directory if it does not exist yet.
    ensure_clean_dir: Ensure a directory exists and is empty.
    copy_tree: Copy every file under a directory, byte for byte.
    slugify: Convert a title to a URL slug.
"""

from __future__ import annotations

import re
import shutil
from datetime import date, datetime, time, timezone
from pathlib import Path

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def escape_html(text: str) -> str:
    """Escape special HTML characters in a string.

    Examples:
        >>> escape_html('<b>"Tom" & Jerry</b>')
        '&lt;b&gt;&quot;Tom&quot; &amp; Jerry&lt;/b&gt;'
    """
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def join_root_url(root_url: str, path: str) -> str:
    """Safely join a root URL and a path, avoiding double slashes.

    Examples:
        >>> join_root_url('https://example.com/', 'about')
        'https://example.com/about'
    """
    if not root_url:
        return path
    base = root_url.rstrip("/")
    suffix = path if path.startswith("/") else f"/{path}"
    return f"{base}{suffix}"


def to_utc(value: date | datetime | str) -> datetime:
    """Normalize a date-like value to an aware UTC datetime.

    Naive values are taken to be UTC already. Precision is cut to
    milliseconds so the value survives a round trip through
    format_iso_instant.

    Args:
        value: A date, datetime or ISO 8601 string.

    Returns:
        Timezone-aware datetime in UTC.

    Raises:
        ValueError: If the value cannot be interpreted as a point in time.
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime.combine(value, time())
    else:
        raise ValueError(f"Not a date: {value!r}")
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.replace(microsecond=moment.microsecond // 1000 * 1000)


def format_iso_instant(moment: datetime) -> str:
    """Format a datetime as an ISO 8601 UTC instant with milliseconds.

    Examples:
        >>> format_iso_instant(datetime(2024, 1, 1, tzinfo=timezone.utc))
        '2024-01-01T00:00:00.000Z'
    """
    moment = moment.astimezone(timezone.utc)
    millis = moment.microsecond // 1000
    return moment.strftime("%Y-%m-%dT%H:%M:%S") + f".{millis:03d}Z"


def format_readable_date(moment: datetime) -> str:
    """Format a datetime as "Month D, YYYY" in UTC, independent of locale.

    Examples:
        >>> format_readable_date(datetime(2024, 1, 1, tzinfo=timezone.utc))
        'January 1, 2024'
    """
    moment = moment.astimezone(timezone.utc)
    return f"{MONTH_NAMES[moment.month - 1]} {moment.day}, {moment.year}"


def ensure_dir(path: Path) -> None:
    """Create a directory (and parents) if it doesn't exist yet."""
    path.mkdir(parents=True, exist_ok=True)


def ensure_clean_dir(path: Path) -> None:
    """Ensure a directory exists and is empty.

    If the directory exists, removes all contents. Creates the
    directory if it doesn't exist.

    Args:
        path: Directory path to clean or create.
    """
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)


def copy_tree(source: Path, target: Path) -> list[Path]:
    """Copy every file under source into target, keeping relative paths.

    Missing source directories count as empty. Copy failures propagate.

    Args:
        source: Directory to copy from.
        target: Directory to copy into; created as needed.

    Returns:
        List of destination paths written, in sorted source order.
    """
    written: list[Path] = []
    if not source.exists():
        return written
    for item in sorted(source.rglob("*")):
        if item.is_dir():
            continue
        dest = target / item.relative_to(source)
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(item, dest)
        written.append(dest)
    return written


def slugify(text: str) -> str:
    """Convert a title or file name to a URL slug.

    Examples:
        >>> slugify("Hello, World!")
        'hello-world'
    """
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", text)
    return cleaned.strip("-").lower()
