"""
Date codec
==========

The index is keyed by the date labels exactly as they appear in the
source headers (`3/12/20`: month/day/2-digit year, no leading zeros).
Queries use a fixed-width external form (`03122020`, MMddyyyy).

- `encode` turns an external query date into an index key.
- `decode` turns an index key back into a `datetime.date`.
- `to_key` turns a date object (e.g. a spreadsheet header cell) into a key.
- `canonical` strips leading zeros from a header label so keys compare lexically.
"""

from __future__ import annotations
from datetime import date, datetime
import re

from .errors import InvalidDateFormat

# Pattern string reported back to callers on a bad query date.
QUERY_DATE_PATTERN = "MMddyyyy"

_QUERY_RE = re.compile(r"^\d{8}$")
_KEY_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2})$")


def to_key(d: date) -> str:
    """Format a date the way the source headers do (M/D/YY)."""
    return f"{d.month}/{d.day}/{d.year % 100:02d}"


def encode(query_date: str) -> str:
    """Translate an external MMddyyyy date into the index key form.

    >>> encode("03122020")
    '3/12/20'
    """
    s = query_date.strip()
    if not _QUERY_RE.match(s):
        raise InvalidDateFormat(QUERY_DATE_PATTERN)
    try:
        d = datetime.strptime(s, "%m%d%Y").date()
    except ValueError as e:
        raise InvalidDateFormat(QUERY_DATE_PATTERN) from e
    return to_key(d)


def is_date_key(label: str) -> bool:
    """True if `label` is a source date header naming a real calendar day."""
    try:
        decode(label)
    except ValueError:
        return False
    return True


def decode(key: str) -> date:
    """Parse an index key back into a date (years are taken as 20YY)."""
    m = _KEY_RE.match(key)
    if not m:
        raise ValueError(f"not a date key: {key!r}")
    month, day, yy = (int(g) for g in m.groups())
    return date(2000 + yy, month, day)


def canonical(label: str) -> str:
    """Normalize a header label to the M/D/YY key form (`03/12/20` -> `3/12/20`)."""
    return to_key(decode(label))
