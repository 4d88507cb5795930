"""
The /api handler: load, select, serialize.

    request ──► CatalogQuery.from_params()
                      │
    source.load() ────┤   (awaited; DataUnavailable → 404)
                      ▼
              select_records()
                      │
                      ▼
              200 application/json
"""

from http import HTTPStatus
from typing import List
import logging

from ..http import HTTPRequest, HTTPResponse, ok_json, error_json
from .query import CatalogQuery, select_records
from .source import DataSource, DataUnavailable, Record


logger = logging.getLogger(__name__)

DATA_UNAVAILABLE_MESSAGE = "Data file not found"


class CatalogHandler:
    """
    Serves the product collection with optional filtering.

    Holds a reference to its DataSource and nothing else, so one instance
    can answer any number of concurrent requests.
    """

    def __init__(self, source: DataSource):
        self.source = source

    async def __call__(self, request: HTTPRequest) -> HTTPResponse:
        query = CatalogQuery.from_params(request.query_params)

        try:
            records = await self.handle_data(query)
        except DataUnavailable:
            return error_json(HTTPStatus.NOT_FOUND, DATA_UNAVAILABLE_MESSAGE)

        logger.debug(f"Catalog query {query} selected {len(records)} record(s)")
        return ok_json(records)

    async def handle_data(self, query: CatalogQuery) -> List[Record]:
        """
        Load the collection and apply `query` to it.

        Raises:
            DataUnavailable: Propagated from the source.
        """
        records = await self.source.load()
        return select_records(records, query)
