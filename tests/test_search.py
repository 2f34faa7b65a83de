from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import pytest

from azrest.core.credentials import AzureKeyCredential
from azrest.core.exceptions import ResourceNotFoundError
from azrest.search import (
    SearchClientOptions,
    SearchField,
    SearchIndex,
    SearchRequestOptions,
    SearchServiceClient,
    ServiceVersion,
)
from azrest.search._generated import odata_key
from http_helpers import install_transport, json_response, text_response

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


_ENDPOINT = "https://my-search.search.windows.net"

_STATISTICS_JSON = {
    "@odata.context": f"{_ENDPOINT}/$metadata#Microsoft.Azure.Search.V2020_06_30."
    "ServiceStatistics",
    "counters": {
        "documentCount": {"usage": 10, "quota": None},
        "indexesCount": {"usage": 1, "quota": 3},
        "indexersCount": {"usage": 0, "quota": 3},
        "dataSourcesCount": {"usage": 0, "quota": 3},
        "storageSize": {"usage": 2048, "quota": 52428800},
        "synonymMaps": {"usage": 0, "quota": 3},
        "skillsetCount": {"usage": 0, "quota": 3},
    },
    "limits": {
        "maxFieldsPerIndex": 1000,
        "maxFieldNestingDepthPerIndex": 10,
        "maxComplexCollectionFieldsPerIndex": 40,
        "maxComplexObjectsInCollectionsPerDocument": 3000,
    },
}


def _client(options: Optional[SearchClientOptions] = None) -> SearchServiceClient:
    return SearchServiceClient(_ENDPOINT, AzureKeyCredential("admin-key"), options)


def test_constructor_validation() -> None:
    credential = AzureKeyCredential("admin-key")
    with pytest.raises(ValueError):
        SearchServiceClient(None, credential)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        SearchServiceClient("http://my-search.search.windows.net", credential)
    with pytest.raises(ValueError):
        SearchServiceClient(_ENDPOINT, None)  # type: ignore[arg-type]


def test_service_name() -> None:
    client = _client()
    assert client.service_name == "my-search"
    assert client.version == ServiceVersion.V2020_06_30


def test_odata_key() -> None:
    assert odata_key("hotels") == "'hotels'"
    assert odata_key("o'brien") == "'o''brien'"


def test_get_service_statistics(mocker: MockerFixture) -> None:
    transport = install_transport(mocker, json_response(_STATISTICS_JSON))
    statistics = _client().get_service_statistics(
        SearchRequestOptions(client_request_id="a2f9c3e4-d0b8-4b7a-8b2e-0e3b4e6d7f11")
    )

    request = transport.requests[0]
    assert request.method == "GET"
    assert request.url == f"{_ENDPOINT}/servicestats"
    assert request.params == {"api-version": "2020-06-30"}
    assert request.headers["api-key"] == "admin-key"
    assert request.headers["x-ms-client-request-id"] == (
        "a2f9c3e4-d0b8-4b7a-8b2e-0e3b4e6d7f11"
    )

    assert statistics.counters is not None
    assert statistics.counters.document_counter is not None
    assert statistics.counters.document_counter.usage == 10
    assert statistics.counters.document_counter.quota is None
    assert statistics.counters.storage_size_counter is not None
    assert statistics.counters.storage_size_counter.quota == 52428800
    assert statistics.limits is not None
    assert statistics.limits.max_fields_per_index == 1000


def test_older_service_version(mocker: MockerFixture) -> None:
    transport = install_transport(mocker, json_response(_STATISTICS_JSON))
    _client(
        options=SearchClientOptions(version=ServiceVersion.V2019_05_06_PREVIEW)
    ).get_service_statistics()
    assert transport.requests[0].params == {"api-version": "2019-05-06-Preview"}
    assert "x-ms-client-request-id" not in transport.requests[0].headers


def test_create_and_get_index(mocker: MockerFixture) -> None:
    index_json = {
        "@odata.etag": '"0x8D7A5D2E3F4A5B6"',
        "name": "hotels",
        "fields": [
            {"name": "hotelId", "type": "Edm.String", "key": True},
            {"name": "description", "type": "Edm.String", "searchable": True},
        ],
    }
    transport = install_transport(
        mocker, json_response(index_json, status=201), json_response(index_json)
    )
    client = _client()

    created = client.create_index(
        SearchIndex(
            "hotels",
            [
                SearchField("hotelId", "Edm.String", key=True),
                SearchField("description", "Edm.String", searchable=True),
            ],
        )
    )
    assert transport.requests[0].method == "POST"
    assert transport.requests[0].url == f"{_ENDPOINT}/indexes"
    assert transport.requests[0].json == {
        "name": "hotels",
        "fields": [
            {"name": "hotelId", "type": "Edm.String", "key": True},
            {"name": "description", "type": "Edm.String", "searchable": True},
        ],
    }
    assert created.etag == '"0x8D7A5D2E3F4A5B6"'

    index = client.get_index("hotels")
    assert transport.requests[1].url == f"{_ENDPOINT}/indexes('hotels')"
    assert index.fields is not None
    assert index.fields[0].key is True


def test_get_index_not_found(mocker: MockerFixture) -> None:
    install_transport(
        mocker,
        json_response(
            {"error": {"code": "", "message": "No index with the name 'x' was found"}},
            status=404,
        ),
    )
    with pytest.raises(ResourceNotFoundError):
        _client().get_index("x")


def test_argument_validation(mocker: MockerFixture) -> None:
    transport = install_transport(mocker)
    client = _client()
    with pytest.raises(ValueError):
        client.create_index(None)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        client.get_index("")
    with pytest.raises(ValueError):
        client.get_search_index_client("")
    with pytest.raises(ValueError):
        SearchIndex("")
    assert transport.requests == []


def test_search_index_client(mocker: MockerFixture) -> None:
    transport = install_transport(
        mocker,
        text_response("42"),
        json_response({"hotelId": "1", "description": "Quiet"}),
    )
    index_client = _client().get_search_index_client("hotels")
    assert index_client.index_name == "hotels"
    assert index_client.endpoint == _ENDPOINT

    assert index_client.get_document_count() == 42
    assert transport.requests[0].url == f"{_ENDPOINT}/indexes('hotels')/docs/$count"
    # the index client shares the service client's credential
    assert transport.requests[0].headers["api-key"] == "admin-key"

    assert index_client.get_document("1") == {"hotelId": "1", "description": "Quiet"}
    assert transport.requests[1].url == f"{_ENDPOINT}/indexes('hotels')/docs('1')"


@pytest.mark.asyncio
async def test_async_operations(mocker: MockerFixture) -> None:
    transport = install_transport(
        mocker,
        json_response(_STATISTICS_JSON),
        json_response({"name": "hotels"}),
        text_response("7"),
    )
    client = _client()
    statistics = await client.get_service_statistics_async()
    assert statistics.counters is not None

    index = await client.get_index_async(
        "hotels", SearchRequestOptions(client_request_id="req")
    )
    assert index.name == "hotels"
    assert transport.requests[1].headers["x-ms-client-request-id"] == "req"

    count = await client.get_search_index_client("hotels").get_document_count_async()
    assert count == 7
