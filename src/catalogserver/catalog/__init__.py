"""
=============================================================================
PRODUCT CATALOG
=============================================================================

    source.py   where records come from (JSON file, memory)
    query.py    category filter + lenient limit, pure functions
    handler.py  the /api handler tying the two together

=============================================================================
"""

from .source import DataSource, JSONFileSource, MemorySource, DataUnavailable, Record
from .query import CatalogQuery, parse_limit, select_records
from .handler import CatalogHandler, DATA_UNAVAILABLE_MESSAGE

__all__ = [
    "DataSource",
    "JSONFileSource",
    "MemorySource",
    "DataUnavailable",
    "Record",
    "CatalogQuery",
    "parse_limit",
    "select_records",
    "CatalogHandler",
    "DATA_UNAVAILABLE_MESSAGE",
]
