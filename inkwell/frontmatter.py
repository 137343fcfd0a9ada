"""Front matter parsing for Inkwell.

A post file starts with a ``---`` delimiter, followed by a YAML document,
a second ``---`` delimiter and the Markdown body. Only the first two
delimiters split the file; later occurrences belong to the body.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .errors import ParseError, ValidationError

DELIMITER = "---"
REQUIRED_FIELDS = ("title", "date", "description")


@dataclass(frozen=True)
class Meta:
    """Metadata parsed from a post's front matter.

    Attributes:
        title: Post title.
        date: Raw date value as YAML produced it (date, datetime or string).
        description: Short post summary.
        hidden: Whether the post is left out of public listings.
    """

    title: str
    date: Any
    description: str
    hidden: bool = False


def split_front_matter(text: str, source_path: Path | None = None) -> tuple[str, str]:
    """Split raw file text into its YAML block and body.

    Args:
        text: Raw file content.
        source_path: Source file, used for error reporting only.

    Returns:
        Tuple of (YAML text, body text). The body is everything after the
        second delimiter, verbatim.

    Raises:
        ParseError: If the text does not contain two delimiters.
    """
    parts = text.split(DELIMITER, 2)
    if len(parts) < 3:
        raise ParseError(source_path, "Missing front matter delimiters")
    _, head, body = parts
    return head, body


def load_front_matter(head: str, source_path: Path | None = None) -> dict[str, Any]:
    """Parse the YAML block of a post into a mapping."""
    try:
        data = yaml.safe_load(head)
    except yaml.YAMLError as exc:
        raise ParseError(source_path, f"Invalid YAML front matter: {exc}", exc) from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ParseError(
            source_path,
            f"Front matter must be a mapping, got {type(data).__name__}",
        )
    return data


def parse_front_matter(text: str, source_path: Path | None = None) -> tuple[Meta, str]:
    """Split a post file and validate its metadata.

    Args:
        text: Raw file content.
        source_path: Source file, used for error reporting only.

    Returns:
        Tuple of (Meta, body text).

    Raises:
        ParseError: If the delimiters or YAML are malformed.
        ValidationError: If a required field is missing or empty.
    """
    head, body = split_front_matter(text, source_path)
    data = load_front_matter(head, source_path)

    missing = [name for name in REQUIRED_FIELDS if _is_blank(data.get(name))]
    if missing:
        raise ValidationError(
            source_path, f"Missing required front matter: {', '.join(missing)}"
        )

    meta = Meta(
        title=str(data["title"]).strip(),
        date=data["date"],
        description=str(data["description"]).strip(),
        hidden=bool(data.get("hidden") or False),
    )
    return meta, body


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False
