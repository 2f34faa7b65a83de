from __future__ import annotations

import datetime
from typing import TYPE_CHECKING

import pytest

from azrest.core.exceptions import AzureRestApiError
from azrest.monitor import (
    AzureMonitorClient,
    MessageData,
    MonitorBase,
    MonitorDomain,
    TelemetryItem,
)
from http_helpers import empty_response, install_transport, json_response, text_response

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


_TIME = datetime.datetime(2021, 3, 4, 5, 6, 7, tzinfo=datetime.timezone.utc)


def _message_item(message: str) -> TelemetryItem:
    return TelemetryItem(
        name="Microsoft.ApplicationInsights.Message",
        time=_TIME,
        instrumentation_key="ikey",
        data=MonitorBase(
            base_type="MessageData",
            base_data=MessageData(message=message, severity_level="Warning"),
        ),
        tags={"ai.cloud.role": "worker"},
    )


def test_telemetry_item_json() -> None:
    assert _message_item("hello").to_json() == {
        "ver": 1,
        "name": "Microsoft.ApplicationInsights.Message",
        "time": "2021-03-04T05:06:07.000000Z",
        "iKey": "ikey",
        "tags": {"ai.cloud.role": "worker"},
        "data": {
            "baseType": "MessageData",
            "baseData": {"ver": 2, "message": "hello", "severityLevel": "Warning"},
        },
    }


def test_telemetry_item_from_json() -> None:
    item = TelemetryItem.from_json(_message_item("hello").to_json())
    assert item.time == _TIME
    assert item.data is not None
    assert isinstance(item.data.base_data, MessageData)
    assert item.data.base_data.message == "hello"

    # unknown domains are kept as the common base
    base = MonitorBase.from_json({"baseType": "Unknown", "baseData": {"test": "t"}})
    assert type(base.base_data) is MonitorDomain
    assert base.base_data.test == "t"


def test_telemetry_item_required() -> None:
    with pytest.raises(ValueError):
        TelemetryItem(name=None, time=_TIME)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        TelemetryItem(name="n", time=None)  # type: ignore[arg-type]


def test_track(mocker: MockerFixture) -> None:
    transport = install_transport(
        mocker,
        json_response(
            {
                "itemsReceived": 2,
                "itemsAccepted": 1,
                "errors": [
                    {"index": 1, "statusCode": 400, "message": "Field 'time' is bad"}
                ],
            },
            status=206,
        ),
    )
    response = AzureMonitorClient().track(
        [_message_item("one"), _message_item("two")]
    )

    request = transport.requests[0]
    assert request.method == "POST"
    assert request.url == "https://dc.services.visualstudio.com/v2.1/track"
    assert request.params == {}
    assert "Authorization" not in request.headers
    assert [item["data"]["baseData"]["message"] for item in request.json] == [
        "one",
        "two",
    ]

    assert response.items_received == 2
    assert response.items_accepted == 1
    assert response.errors is not None
    assert response.errors[0].index == 1
    assert response.errors[0].status_code == 400


@pytest.mark.asyncio
async def test_track_async(mocker: MockerFixture) -> None:
    transport = install_transport(
        mocker, json_response({"itemsReceived": 1, "itemsAccepted": 1, "errors": []})
    )
    client = AzureMonitorClient("https://westus-0.in.applicationinsights.azure.com/")
    response = await client.track_async([_message_item("one")])
    assert transport.requests[0].url == (
        "https://westus-0.in.applicationinsights.azure.com/v2.1/track"
    )
    assert response.errors == []

    with pytest.raises(ValueError):
        await AzureMonitorClient().track_async(None)  # type: ignore[arg-type]


def test_track_empty_or_unexpected_body(mocker: MockerFixture) -> None:
    install_transport(mocker, empty_response(200), text_response("Accepted"))
    client = AzureMonitorClient()

    response = client.track([_message_item("one")])
    assert response.items_received is None
    assert response.errors is None

    with pytest.raises(AzureRestApiError) as exc_info:
        client.track([_message_item("two")])
    assert exc_info.value.code == "UnexpectedResponse"
