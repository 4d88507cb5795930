"""
=============================================================================
CATALOG DATA SOURCE
=============================================================================

Loads the product collection that /api serves.

=============================================================================
THE ONE PLACE WE WAIT
=============================================================================

Everything else in a request is pure computation on data already in
memory. Reading the catalog is the single step that touches the disk, so it
is the single `await` in the request path:

    async def load(self):
        text = await asyncio.to_thread(self.path.read_bytes)   ← suspend
        ...parse, validate...                                  ← pure

asyncio.to_thread() runs the blocking read on a worker thread. While it
runs, the event loop keeps serving other connections.

=============================================================================
FAILURE BECOMES ONE EXCEPTION
=============================================================================

A lot can go wrong with a file on disk:

    FileNotFoundError     - the file was deleted
    PermissionError       - we can't read it
    UnicodeDecodeError    - it isn't UTF-8
    JSONDecodeError       - it isn't JSON
    RecursionError        - it nests deeper than the parser can follow
    wrong shape           - it's JSON, but not a list of objects

Callers don't care which. They get DataUnavailable, with the original
error chained as __cause__ for the logs, and answer the request with a 404.
The collection is never served half-parsed.

=============================================================================
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Union
import asyncio
import json
import logging


logger = logging.getLogger(__name__)


# One item of the catalog: a JSON object such as
#   {"name": "Laptop", "category": "electronics", "price": 999}
Record = Dict[str, Any]


class DataUnavailable(Exception):
    """The catalog could not be read or parsed."""


class DataSource(ABC):
    """
    Anything that can produce the ordered record collection.

    The data handler depends on this interface only, so tests can hand it
    an in-memory source instead of a file.
    """

    @abstractmethod
    async def load(self) -> List[Record]:
        """
        Return a fresh list of records, in source order.

        Raises:
            DataUnavailable: If the collection can't be produced.
        """


class JSONFileSource(DataSource):
    """
    Reads the catalog from a UTF-8 JSON file on every call.

    No caching: edit the file and the next request sees the change.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    async def load(self) -> List[Record]:
        try:
            raw = await asyncio.to_thread(self.path.read_bytes)
            data = json.loads(raw.decode("utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
            logger.warning(f"Catalog unavailable ({self.path}): {type(e).__name__}: {e}")
            raise DataUnavailable(str(self.path)) from e

        return validate_records(data, source=str(self.path))

    def __repr__(self) -> str:
        return f"JSONFileSource({str(self.path)!r})"


class MemorySource(DataSource):
    """
    Serves a fixed list of records.

    load() returns a new list each time, so a caller that appends to or
    reorders its result can't affect the next request.
    """

    def __init__(self, records: List[Record]):
        self._records = list(records)

    async def load(self) -> List[Record]:
        return list(self._records)


def validate_records(data: Any, source: str = "<data>") -> List[Record]:
    """
    Check that parsed JSON has the catalog's shape: a list of objects.

    A record without "category" is accepted; it simply never matches a
    category filter.

    Raises:
        DataUnavailable: If the top level is not a list, or an element is
                         not an object.
    """
    if not isinstance(data, list):
        logger.warning(f"Catalog unavailable ({source}): top level is {type(data).__name__}, not a list")
        raise DataUnavailable(source)

    for index, item in enumerate(data):
        if not isinstance(item, dict):
            logger.warning(f"Catalog unavailable ({source}): item {index} is {type(item).__name__}, not an object")
            raise DataUnavailable(source)

    return data
