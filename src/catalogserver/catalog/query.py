"""
=============================================================================
CATALOG QUERIES: FILTER, THEN LIMIT
=============================================================================

Query parameters let a client narrow down what /api returns:

    /api                              → every product
    /api?category=electronics         → only electronics
    /api?limit=5                      → the first 5 products
    /api?category=electronics&limit=5 → the first 5 electronics

=============================================================================
ORDER OF OPERATIONS
=============================================================================

Filtering always happens BEFORE limiting:

    records:  [a1, b1, a2, b2, a3]
                    │
      category=a    ▼
              [a1, a2, a3]
                    │
      limit=2       ▼
              [a1, a2]

Doing it the other way round (limit 2 → [a1, b1], then filter → [a1])
would return fewer matches than asked for. Neither step reorders or
invents records, so the answer is always a subsequence of the catalog.

=============================================================================
LENIENT LIMIT PARSING
=============================================================================

`limit` is read the way a forgiving browser-side parseInt() would read it:
skip leading whitespace, take an optional sign and as many digits as
follow, ignore the rest.

    "5"      → 5
    " 7"     → 7
    "5abc"   → 5
    "3.9"    → 3
    "+2"     → 2
    "0"      → 0     (empty result)
    "abc"    → None  (no limit)
    ""       → None  (no limit)
    "-2"     → None  (negative: no limit)
    "9" * 5000 → sys.maxsize (more than any catalog holds)

A value we can't read is IGNORED, not rejected: the request still
succeeds, just without a limit.

=============================================================================
"""

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional
import re
import sys

from .source import Record


# Optional whitespace, optional sign, then at least one digit.
_LEADING_INT = re.compile(r"\s*([+-]?)([0-9]+)")

# More digits than this can only mean "more records than any catalog has".
_MAX_LIMIT_DIGITS = len(str(sys.maxsize)) - 1


def parse_limit(value: Optional[str]) -> Optional[int]:
    """
    Read a limit leniently.

    Returns:
        A non-negative int, or None meaning "no limit".
    """
    if value is None:
        return None

    match = _LEADING_INT.match(value)
    if not match:
        return None

    sign, digits = match.groups()
    digits = digits.lstrip("0") or "0"
    if sign == "-" and digits != "0":
        return None

    # int() refuses very long digit strings; any such value covers
    # the whole collection anyway.
    if len(digits) > _MAX_LIMIT_DIGITS:
        return sys.maxsize
    return int(digits)


@dataclass(frozen=True)
class CatalogQuery:
    """
    What the client asked for, already parsed.

        category: exact category to keep, or None for all
        limit:    max number of records, or None for all
    """

    category: Optional[str] = None
    limit: Optional[int] = None

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "CatalogQuery":
        """
        Build a query from request query parameters.

        An empty ?category= means "no filter", the same as leaving it out.
        The category is compared exactly as sent: no trimming, no case
        folding.
        """
        category = params.get("category") or None
        return cls(category=category, limit=parse_limit(params.get("limit")))


def select_records(records: Iterable[Record], query: CatalogQuery) -> List[Record]:
    """
    Apply a query to a record collection.

    Always returns a NEW list; `records` is never modified.
    """
    # Step 1: filter
    if query.category is not None:
        selected = [r for r in records if r.get("category") == query.category]
    else:
        selected = list(records)

    # Step 2: limit (applies to the filtered list)
    if query.limit is not None:
        selected = selected[:query.limit]

    return selected
