"""Opaque keyset cursors shared by every listing.

A cursor packs the ordering value (a timestamp) and a string tiebreak of the
last row on a page. Listings order by ``(ordering DESC, tiebreak DESC)`` and
resume strictly below the cursor, so rows sharing a timestamp are neither
repeated nor skipped.
"""

import base64
import binascii
import json

from collections.abc import Callable
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

# Far above any token encode() produces for a datetime and a record key.
MAX_TOKEN_LENGTH = 1024


@dataclass(frozen=True, slots=True)
class Cursor:
    """Position of the last row returned on a page."""

    ordering_value: datetime
    tiebreak: str


def encode(ordering_value: datetime, tiebreak: str) -> str:
    """Pack an ordering position into an opaque token."""
    payload = {"orderingValue": ordering_value.isoformat(), "tiebreak": tiebreak}
    raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def decode(token: str | None) -> Cursor | None:
    """Unpack a token produced by :func:`encode`.

    Anything that does not decode cleanly yields ``None``, which callers
    treat exactly like a missing cursor.
    """
    if not token or len(token) > MAX_TOKEN_LENGTH:
        return None

    try:
        raw = base64.b64decode(token.encode("ascii"), validate=True)
        payload = json.loads(raw.decode("utf-8"))
    except (ValueError, binascii.Error, UnicodeError, RecursionError):
        return None

    if not isinstance(payload, dict):
        return None

    ordering = payload.get("orderingValue")
    tiebreak = payload.get("tiebreak")
    if not isinstance(ordering, str) or not isinstance(tiebreak, str):
        return None

    try:
        ordering_value = datetime.fromisoformat(ordering)
    except ValueError:
        return None

    return Cursor(ordering_value=ordering_value, tiebreak=tiebreak)


def keyset_predicate(
    *,
    ordering_column: str,
    tiebreak_column: str,
    cursor: Cursor,
    params: list[Any],
) -> str:
    """Append cursor parameters and return the SQL resume predicate."""
    value_idx = len(params) + 1
    tiebreak_idx = value_idx + 1
    params.extend([cursor.ordering_value, cursor.tiebreak])
    return (
        f"({ordering_column}, {tiebreak_column}) "
        f"< (${value_idx}::timestamptz, ${tiebreak_idx}::text)"
    )


def paginate[T](
    rows: Sequence[T],
    limit: int,
    position: Callable[[T], tuple[datetime, str]],
) -> tuple[list[T], str | None]:
    """Trim a ``limit + 1`` fetch to one page and build the next cursor."""
    page = list(rows[:limit])
    if len(rows) <= limit or not page:
        return page, None

    ordering_value, tiebreak = position(page[-1])
    return page, encode(ordering_value, tiebreak)
