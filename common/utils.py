"""Utility functions for the BINAH topic API."""

import re
from datetime import date, datetime, timezone
from typing import List, Optional, Sequence, Union

DEFAULT_AUTHOR = "Usuário"
PREVIEW_LENGTH = 200
KEYWORD_SEPARATOR = ", "

_TAG_RE = re.compile(r"<[^>]*>")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def join_keywords(keywords: Union[Sequence[str], str, None]) -> str:
    """Flatten keywords into the comma-joined form they are stored in.

    A list is joined with ", ", a raw string is stored as-is and anything
    falsy becomes an empty string. Keywords that themselves contain a comma
    will not survive the round trip through split_keywords().

    Examples:
        ["faq", "setup"] -> "faq, setup"
        "faq, setup"     -> "faq, setup"
        None             -> ""
    """
    if isinstance(keywords, (list, tuple)):
        return KEYWORD_SEPARATOR.join(keywords)
    return keywords or ""


def split_keywords(stored: Optional[str]) -> List[str]:
    """Inverse of join_keywords(): split on commas and trim each element."""
    if not stored:
        return []
    return [keyword.strip() for keyword in stored.split(",")]


def make_preview(content: Optional[str]) -> str:
    """Strip markup from content and cut it down to a short teaser.

    Examples:
        "<b>Hi</b> there" -> "Hi there..."
        ""                -> ""
    """
    if not content:
        return ""
    return _TAG_RE.sub("", content)[:PREVIEW_LENGTH] + "..."


def parse_limit(raw: Optional[str]) -> Union[int, str, None]:
    """Parse a raw ?limit= value.

    The leading integer is used when there is one ("5", "5abc" -> 5). Empty
    input means no limit. Anything else is handed back untouched so the
    database gets to reject it; negative numbers are not checked here either.
    """
    if raw is None or raw == "":
        return None
    match = _LEADING_INT_RE.match(raw)
    if match:
        return int(match.group(1))
    return raw


def to_date_string(value: Union[datetime, date, None]) -> str:
    """Render a timestamp as a UTC YYYY-MM-DD date, falling back to today."""
    if value is None:
        return datetime.now(timezone.utc).date().isoformat()
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date().isoformat()
    return value.isoformat()


def to_utc_iso(value: datetime) -> str:
    """ISO-8601 in UTC with milliseconds and a Z suffix.

    Naive timestamps are taken to already be UTC, which is how the topics
    table stores them.

    Examples:
        datetime(2024, 3, 1, 9, 0) -> "2024-03-01T09:00:00.000Z"
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")
