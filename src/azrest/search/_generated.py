"""
REST clients for the Search service, one method per REST operation. SearchServiceClient
and SearchIndexClient forward to these.
"""
from __future__ import annotations

from typing import Any, Optional

from azrest.core.arguments import assert_not_none, assert_not_none_or_empty
from azrest.core.pipeline import HttpPipeline

from .models import SearchIndex, SearchServiceStatistics

# OData wants application/json;odata.metadata=minimal, plain json works too
_ACCEPT = {"Accept": "application/json;odata.metadata=minimal"}


def odata_key(value: str) -> str:
    """Quotes a string for use inside e.g. indexes('...'), ' is escaped as ''"""
    return "'" + value.replace("'", "''") + "'"


class ServiceRestClient:
    def __init__(self, pipeline: HttpPipeline):
        self._pipeline = pipeline

    def get_service_statistics(
        self, client_request_id: Optional[str] = None
    ) -> SearchServiceStatistics:
        return SearchServiceStatistics.from_json(
            self._pipeline.request_object(
                "GET",
                "servicestats",
                headers=_ACCEPT,
                client_request_id=client_request_id,
            )
        )

    async def get_service_statistics_async(
        self, client_request_id: Optional[str] = None
    ) -> SearchServiceStatistics:
        return SearchServiceStatistics.from_json(
            await self._pipeline.request_object_async(
                "GET",
                "servicestats",
                headers=_ACCEPT,
                client_request_id=client_request_id,
            )
        )


class IndexesRestClient:
    def __init__(self, pipeline: HttpPipeline):
        self._pipeline = pipeline

    def create(
        self, index: SearchIndex, client_request_id: Optional[str] = None
    ) -> SearchIndex:
        assert_not_none(index, "index")
        return SearchIndex.from_json(
            self._pipeline.request_object(
                "POST",
                "indexes",
                json_content=index.to_json(),
                headers=_ACCEPT,
                client_request_id=client_request_id,
            )
        )

    async def create_async(
        self, index: SearchIndex, client_request_id: Optional[str] = None
    ) -> SearchIndex:
        assert_not_none(index, "index")
        return SearchIndex.from_json(
            await self._pipeline.request_object_async(
                "POST",
                "indexes",
                json_content=index.to_json(),
                headers=_ACCEPT,
                client_request_id=client_request_id,
            )
        )

    def get(
        self, index_name: str, client_request_id: Optional[str] = None
    ) -> SearchIndex:
        assert_not_none_or_empty(index_name, "index_name")
        return SearchIndex.from_json(
            self._pipeline.request_object(
                "GET",
                f"indexes({odata_key(index_name)})",
                headers=_ACCEPT,
                client_request_id=client_request_id,
            )
        )

    async def get_async(
        self, index_name: str, client_request_id: Optional[str] = None
    ) -> SearchIndex:
        assert_not_none_or_empty(index_name, "index_name")
        return SearchIndex.from_json(
            await self._pipeline.request_object_async(
                "GET",
                f"indexes({odata_key(index_name)})",
                headers=_ACCEPT,
                client_request_id=client_request_id,
            )
        )


class DocumentsRestClient:
    def __init__(self, pipeline: HttpPipeline, index_name: str):
        assert_not_none_or_empty(index_name, "index_name")
        self._pipeline = pipeline
        self._index_path = f"indexes({odata_key(index_name)})"

    @staticmethod
    def _parse_count(body: Any) -> int:
        # $count is returned as text/plain
        return int(body.strip() if isinstance(body, str) else body)

    def count(self, client_request_id: Optional[str] = None) -> int:
        return self._parse_count(
            self._pipeline.request(
                "GET",
                f"{self._index_path}/docs/$count",
                client_request_id=client_request_id,
            )
        )

    async def count_async(self, client_request_id: Optional[str] = None) -> int:
        return self._parse_count(
            await self._pipeline.request_async(
                "GET",
                f"{self._index_path}/docs/$count",
                client_request_id=client_request_id,
            )
        )

    def get(self, key: str, client_request_id: Optional[str] = None) -> Any:
        assert_not_none_or_empty(key, "key")
        return self._pipeline.request(
            "GET",
            f"{self._index_path}/docs({odata_key(key)})",
            headers=_ACCEPT,
            client_request_id=client_request_id,
        )

    async def get_async(self, key: str, client_request_id: Optional[str] = None) -> Any:
        assert_not_none_or_empty(key, "key")
        return await self._pipeline.request_async(
            "GET",
            f"{self._index_path}/docs({odata_key(key)})",
            headers=_ACCEPT,
            client_request_id=client_request_id,
        )
