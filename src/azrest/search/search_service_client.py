from __future__ import annotations

import urllib.parse
from typing import Optional

from azrest.core.arguments import (
    assert_https_scheme,
    assert_not_none,
    assert_not_none_or_empty,
)
from azrest.core.credentials import AzureKeyCredential
from azrest.core.pipeline import HttpPipeline

from ._generated import IndexesRestClient, ServiceRestClient
from .models import (
    SearchClientOptions,
    SearchIndex,
    SearchRequestOptions,
    SearchServiceStatistics,
)
from .search_index_client import SearchIndexClient


def get_search_service_name(endpoint: str) -> str:
    """https://{search_service}.search.windows.net -> search_service"""
    host = urllib.parse.urlparse(endpoint).hostname or ""
    return host.split(".")[0]


def _client_request_id(options: Optional[SearchRequestOptions]) -> Optional[str]:
    return options.client_request_id if options is not None else None


class SearchServiceClient:
    """
    Azure Cognitive Search client that can be used to manage and query indexes and
    documents, as well as manage other resources, on a Search service.

    endpoint is likely to be similar to "https://{search_service}.search.windows.net"
    and must use HTTPS. credential needs to be an admin key to perform any operations on
    the SearchServiceClient, see
    https://docs.microsoft.com/azure/search/search-security-api-keys
    """

    def __init__(
        self,
        endpoint: str,
        credential: AzureKeyCredential,
        options: Optional[SearchClientOptions] = None,
    ):
        assert_not_none(endpoint, "endpoint")
        assert_https_scheme(endpoint, "endpoint")
        assert_not_none(credential, "credential")

        if options is None:
            options = SearchClientOptions()
        self.endpoint = endpoint.rstrip("/")
        self.version = options.version
        self._pipeline = HttpPipeline(
            self.endpoint, credential, options.version.value, timeout=options.timeout
        )
        self._service_name: Optional[str] = None
        self._service_client: Optional[ServiceRestClient] = None
        self._indexes_client: Optional[IndexesRestClient] = None

    @property
    def service_name(self) -> str:
        """The name of the Search service, taken from the endpoint"""
        if self._service_name is None:
            self._service_name = get_search_service_name(self.endpoint)
        return self._service_name

    @property
    def _service(self) -> ServiceRestClient:
        if self._service_client is None:
            self._service_client = ServiceRestClient(self._pipeline)
        return self._service_client

    @property
    def _indexes(self) -> IndexesRestClient:
        if self._indexes_client is None:
            self._indexes_client = IndexesRestClient(self._pipeline)
        return self._indexes_client

    def get_search_index_client(self, index_name: str) -> SearchIndexClient:
        """
        A SearchIndexClient for document operations like querying or adding documents
        to index_name. The same pipeline (including authentication and any other
        configuration) is used for the SearchIndexClient.
        """
        assert_not_none_or_empty(index_name, "index_name")
        return SearchIndexClient(
            self.endpoint, index_name, self._pipeline, self.version
        )

    def get_service_statistics(
        self, options: Optional[SearchRequestOptions] = None
    ) -> SearchServiceStatistics:
        """
        Gets service level statistics for a Search service: the number and type of
        objects in the service, the maximum allowed for each object type given the
        service tier, actual and maximum storage, and other limits that vary by tier.

        Statistics on document count and storage size are collected every few minutes,
        not in real time, so they may not reflect changes caused by recent indexing
        operations.
        """
        return self._service.get_service_statistics(_client_request_id(options))

    async def get_service_statistics_async(
        self, options: Optional[SearchRequestOptions] = None
    ) -> SearchServiceStatistics:
        """See get_service_statistics"""
        return await self._service.get_service_statistics_async(
            _client_request_id(options)
        )

    def create_index(
        self, index: SearchIndex, options: Optional[SearchRequestOptions] = None
    ) -> SearchIndex:
        """
        Creates a new search index. The returned SearchIndex may differ slightly from
        what was passed in since the service may return back fields set to their
        default values depending on the field type and other properties.
        """
        assert_not_none(index, "index")
        return self._indexes.create(index, _client_request_id(options))

    async def create_index_async(
        self, index: SearchIndex, options: Optional[SearchRequestOptions] = None
    ) -> SearchIndex:
        """See create_index"""
        assert_not_none(index, "index")
        return await self._indexes.create_async(index, _client_request_id(options))

    def get_index(
        self, index_name: str, options: Optional[SearchRequestOptions] = None
    ) -> SearchIndex:
        assert_not_none_or_empty(index_name, "index_name")
        return self._indexes.get(index_name, _client_request_id(options))

    async def get_index_async(
        self, index_name: str, options: Optional[SearchRequestOptions] = None
    ) -> SearchIndex:
        assert_not_none_or_empty(index_name, "index_name")
        return await self._indexes.get_async(index_name, _client_request_id(options))
