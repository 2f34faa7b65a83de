"""
These tests talk to a real Azurite emulator, e.g.
docker run -p 10001:10001 mcr.microsoft.com/azure-storage/azurite azurite-queue
--queueHost 0.0.0.0
and then set AZURITE_CONNECTION_STRING=UseDevelopmentStorage=true
"""
from __future__ import annotations

import os
import uuid

import pytest

from azrest.core.constants import AZURITE_CONNECTION_STRING
from azrest.storage import (
    Binder,
    BindingError,
    FunctionInvocationError,
    JobHost,
    Queue,
    QueueMessage,
    QueueServiceClient,
    QueueTrigger,
    queue_trigger,
)

pytestmark = [
    pytest.mark.azurite,
    pytest.mark.skipif(
        not os.environ.get(AZURITE_CONNECTION_STRING),
        reason=f"{AZURITE_CONNECTION_STRING} is not set",
    ),
]


@pytest.fixture
def queue_service() -> QueueServiceClient:
    return QueueServiceClient.from_connection_string(
        os.environ[AZURITE_CONNECTION_STRING]
    )


def _unique_queue_name(prefix: str) -> str:
    # queue names are lowercase letters, numbers and hyphens
    return f"{prefix}-{uuid.uuid4().hex[:16]}"


def test_queue_round_trip(queue_service: QueueServiceClient) -> None:
    queue = queue_service.get_queue_client(_unique_queue_name("round-trip"))
    assert queue.create_if_not_exists()
    try:
        assert not queue.create_if_not_exists()
        queue.send_message(b"hello")
        (message,) = queue.receive_messages(visibility_timeout_secs=30)
        assert message.content == b"hello"
        queue.delete_message(message.message_id, message.pop_receipt)
        assert queue.receive_messages() == []
    finally:
        queue.delete()


def test_trigger_cannot_be_bound(queue_service: QueueServiceClient) -> None:
    queue_name = _unique_queue_name("trigger")
    queue = queue_service.get_queue_client(queue_name)
    queue.create_if_not_exists()
    try:
        queue.send_message(b"ignored")

        @queue_trigger(queue_name)
        def bind_trigger(message: QueueMessage, binder: Binder) -> None:
            binder.bind(QueueTrigger(queue_name))

        with pytest.raises(FunctionInvocationError) as exc_info:
            JobHost(queue_service, [bind_trigger]).run_once()
        assert isinstance(exc_info.value.__cause__, BindingError)
        assert str(exc_info.value.__cause__) == (
            "No binding found for attribute 'QueueTrigger'."
        )
    finally:
        queue.delete()


@pytest.mark.asyncio
async def test_output_binding_async(queue_service: QueueServiceClient) -> None:
    input_name = _unique_queue_name("input")
    output_name = _unique_queue_name("output")
    input_queue = queue_service.get_queue_client(input_name)
    output_queue = queue_service.get_queue_client(output_name)
    await input_queue.create_if_not_exists_async()
    await output_queue.create_if_not_exists_async()
    try:
        await input_queue.send_message_async(b"forward me")

        @queue_trigger(input_name)
        async def forward(message: QueueMessage, binder: Binder) -> None:
            await binder.bind(Queue(output_name)).send_message_async(message.content)

        assert await JobHost(queue_service, [forward]).run_once_async() == 1
        (message,) = await output_queue.receive_messages_async()
        assert message.content == b"forward me"
        assert await input_queue.receive_messages_async() == []
    finally:
        await input_queue.delete_async()
        await output_queue.delete_async()
