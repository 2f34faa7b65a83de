from __future__ import annotations

import dataclasses
import enum
from typing import Any, Dict, List, Optional

from azrest.core.arguments import assert_not_none_or_empty
from azrest.core.serialization import (
    from_json_list,
    from_json_optional,
    set_if_defined,
    to_json_list,
)


class ServiceVersion(enum.Enum):
    """The REST API versions of the Search service this library can talk to"""

    V2019_05_06_PREVIEW = "2019-05-06-Preview"
    V2020_06_30 = "2020-06-30"


LATEST_SERVICE_VERSION = ServiceVersion.V2020_06_30


@dataclasses.dataclass
class SearchClientOptions:
    version: ServiceVersion = LATEST_SERVICE_VERSION
    timeout: Optional[float] = None


@dataclasses.dataclass
class SearchRequestOptions:
    """Per-request options, client_request_id is sent as x-ms-client-request-id"""

    client_request_id: Optional[str] = None


@dataclasses.dataclass
class SearchField:
    name: str
    type: str
    key: Optional[bool] = None
    searchable: Optional[bool] = None
    filterable: Optional[bool] = None
    sortable: Optional[bool] = None
    facetable: Optional[bool] = None
    retrievable: Optional[bool] = None

    def to_json(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"name": self.name, "type": self.type}
        set_if_defined(result, "key", self.key)
        set_if_defined(result, "searchable", self.searchable)
        set_if_defined(result, "filterable", self.filterable)
        set_if_defined(result, "sortable", self.sortable)
        set_if_defined(result, "facetable", self.facetable)
        set_if_defined(result, "retrievable", self.retrievable)
        return result

    @classmethod
    def from_json(cls, json: Dict[str, Any]) -> SearchField:
        return cls(
            name=json["name"],
            type=json["type"],
            key=json.get("key"),
            searchable=json.get("searchable"),
            filterable=json.get("filterable"),
            sortable=json.get("sortable"),
            facetable=json.get("facetable"),
            retrievable=json.get("retrievable"),
        )


@dataclasses.dataclass
class SearchIndex:
    """
    The definition of a search index. etag is set by the service and is sent back so
    that updates can be made conditional on it.
    """

    name: str
    fields: Optional[List[SearchField]] = None
    etag: Optional[str] = None

    def __post_init__(self) -> None:
        assert_not_none_or_empty(self.name, "name")

    def to_json(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"name": self.name}
        set_if_defined(result, "fields", to_json_list(self.fields))
        set_if_defined(result, "@odata.etag", self.etag)
        return result

    @classmethod
    def from_json(cls, json: Dict[str, Any]) -> SearchIndex:
        return cls(
            name=json["name"],
            fields=from_json_list(json.get("fields"), SearchField.from_json),
            etag=json.get("@odata.etag"),
        )


@dataclasses.dataclass
class SearchResourceCounter:
    usage: int
    # None means unlimited
    quota: Optional[int] = None

    @classmethod
    def from_json(cls, json: Dict[str, Any]) -> SearchResourceCounter:
        return cls(usage=json["usage"], quota=json.get("quota"))


def _counter(json: Dict[str, Any], key: str) -> Optional[SearchResourceCounter]:
    return from_json_optional(json.get(key), SearchResourceCounter.from_json)


@dataclasses.dataclass
class SearchServiceCounters:
    document_counter: Optional[SearchResourceCounter] = None
    index_counter: Optional[SearchResourceCounter] = None
    indexer_counter: Optional[SearchResourceCounter] = None
    data_source_counter: Optional[SearchResourceCounter] = None
    storage_size_counter: Optional[SearchResourceCounter] = None
    synonym_map_counter: Optional[SearchResourceCounter] = None
    skillset_counter: Optional[SearchResourceCounter] = None

    @classmethod
    def from_json(cls, json: Dict[str, Any]) -> SearchServiceCounters:
        return cls(
            document_counter=_counter(json, "documentCount"),
            index_counter=_counter(json, "indexesCount"),
            indexer_counter=_counter(json, "indexersCount"),
            data_source_counter=_counter(json, "dataSourcesCount"),
            storage_size_counter=_counter(json, "storageSize"),
            synonym_map_counter=_counter(json, "synonymMaps"),
            skillset_counter=_counter(json, "skillsetCount"),
        )


@dataclasses.dataclass
class SearchServiceLimits:
    max_fields_per_index: Optional[int] = None
    max_field_nesting_depth_per_index: Optional[int] = None
    max_complex_collection_fields_per_index: Optional[int] = None
    max_complex_objects_in_collections_per_document: Optional[int] = None

    @classmethod
    def from_json(cls, json: Dict[str, Any]) -> SearchServiceLimits:
        return cls(
            max_fields_per_index=json.get("maxFieldsPerIndex"),
            max_field_nesting_depth_per_index=json.get("maxFieldNestingDepthPerIndex"),
            max_complex_collection_fields_per_index=json.get(
                "maxComplexCollectionFieldsPerIndex"
            ),
            max_complex_objects_in_collections_per_document=json.get(
                "maxComplexObjectsInCollectionsPerDocument"
            ),
        )


@dataclasses.dataclass
class SearchServiceStatistics:
    """Resource counters and limits of a Search service"""

    counters: Optional[SearchServiceCounters] = None
    limits: Optional[SearchServiceLimits] = None

    @classmethod
    def from_json(cls, json: Dict[str, Any]) -> SearchServiceStatistics:
        return cls(
            counters=from_json_optional(
                json.get("counters"), SearchServiceCounters.from_json
            ),
            limits=from_json_optional(
                json.get("limits"), SearchServiceLimits.from_json
            ),
        )
