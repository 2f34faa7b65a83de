"""Azure Cognitive Search: service statistics, indexes and documents"""

from .models import (
    SearchClientOptions,
    SearchField,
    SearchIndex,
    SearchRequestOptions,
    SearchResourceCounter,
    SearchServiceCounters,
    SearchServiceLimits,
    SearchServiceStatistics,
    ServiceVersion,
)
from .search_index_client import SearchIndexClient
from .search_service_client import SearchServiceClient

__all__ = [
    "SearchClientOptions",
    "SearchField",
    "SearchIndex",
    "SearchIndexClient",
    "SearchRequestOptions",
    "SearchResourceCounter",
    "SearchServiceClient",
    "SearchServiceCounters",
    "SearchServiceLimits",
    "SearchServiceStatistics",
    "ServiceVersion",
]
