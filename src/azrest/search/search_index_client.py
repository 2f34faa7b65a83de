from __future__ import annotations

from typing import Any, Dict, Optional

from azrest.core.arguments import assert_not_none, assert_not_none_or_empty
from azrest.core.pipeline import HttpPipeline

from ._generated import DocumentsRestClient
from .models import SearchRequestOptions, ServiceVersion


class SearchIndexClient:
    """
    Document operations on a single index. Get one from
    SearchServiceClient.get_search_index_client.
    """

    def __init__(
        self,
        endpoint: str,
        index_name: str,
        pipeline: HttpPipeline,
        version: ServiceVersion,
    ):
        assert_not_none(endpoint, "endpoint")
        assert_not_none_or_empty(index_name, "index_name")
        assert_not_none(pipeline, "pipeline")
        self.endpoint = endpoint
        self.index_name = index_name
        self.version = version
        self._documents = DocumentsRestClient(pipeline, index_name)

    def get_document_count(self, options: Optional[SearchRequestOptions] = None) -> int:
        """The number of documents in the index, which may lag recent indexing"""
        return self._documents.count(options.client_request_id if options else None)

    async def get_document_count_async(
        self, options: Optional[SearchRequestOptions] = None
    ) -> int:
        return await self._documents.count_async(
            options.client_request_id if options else None
        )

    def get_document(
        self, key: str, options: Optional[SearchRequestOptions] = None
    ) -> Dict[str, Any]:
        """Retrieves a document by its key field"""
        return self._documents.get(key, options.client_request_id if options else None)

    async def get_document_async(
        self, key: str, options: Optional[SearchRequestOptions] = None
    ) -> Dict[str, Any]:
        return await self._documents.get_async(
            key, options.client_request_id if options else None
        )
