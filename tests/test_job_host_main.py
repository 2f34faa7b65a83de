from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, List

import pytest

from azrest.core.constants import AZURE_STORAGE_CONNECTION_STRING
from azrest.core.transport import HttpResponse
from azrest.storage import (
    Binder,
    JobHost,
    QueueMessage,
    QueueServiceClient,
    queue_trigger,
)
from azrest.storage.job_host_main import command_line_main, load_function
from http_helpers import empty_response, install_transport, text_response

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


received: List[bytes] = []


@queue_trigger("jobs")
def record(message: QueueMessage, binder: Binder) -> None:
    received.append(message.content)


def _xml_response(body: str) -> HttpResponse:
    return text_response(body, content_type="application/xml")


def test_load_function() -> None:
    assert load_function(f"{__name__}:record") is record
    with pytest.raises(ValueError):
        load_function("no_function_name")
    with pytest.raises(AttributeError):
        load_function(f"{__name__}:does_not_exist")


def test_command_line_once(
    monkeypatch: pytest.MonkeyPatch, mocker: MockerFixture
) -> None:
    monkeypatch.setenv(AZURE_STORAGE_CONNECTION_STRING, "UseDevelopmentStorage=true")
    transport = install_transport(
        mocker,
        _xml_response(
            "<QueueMessagesList><QueueMessage><MessageId>m1</MessageId>"
            "<PopReceipt>p1</PopReceipt><MessageText>aGVsbG8=</MessageText>"
            "</QueueMessage></QueueMessagesList>"
        ),
        empty_response(204),
    )
    received.clear()

    command_line_main([f"{__name__}:record", "--once", "--batch-size", "2"])

    assert received == [b"hello"]
    assert transport.requests[0].url == (
        "http://127.0.0.1:10001/devstoreaccount1/jobs/messages"
    )
    assert transport.requests[0].params["numofmessages"] == "2"
    assert transport.requests[1].method == "DELETE"


def test_command_line_needs_connection_string(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv(AZURE_STORAGE_CONNECTION_STRING, raising=False)
    with pytest.raises(SystemExit):
        command_line_main([f"{__name__}:record", "--once"])


@pytest.mark.asyncio
async def test_run_async_sleeps_when_idle(mocker: MockerFixture) -> None:
    transport = install_transport(mocker, _xml_response("<QueueMessagesList />"))
    sleep = mocker.patch(
        "azrest.storage.bindings.asyncio.sleep", side_effect=asyncio.CancelledError
    )
    host = JobHost(
        QueueServiceClient.from_connection_string("UseDevelopmentStorage=true"),
        [record],
    )
    with pytest.raises(asyncio.CancelledError):
        await host.run_async(poll_interval_secs=7)
    sleep.assert_called_once_with(7)
    assert len(transport.requests) == 1
