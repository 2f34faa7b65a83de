"""
A small queue-triggered job host in the spirit of Azure Functions/WebJobs bindings.

Job functions are registered with the queue_trigger decorator and take (message,
binder). The binder lets a function bind additional attributes at runtime, e.g. an
output Queue. Triggers can only be declared with the decorator, binding a QueueTrigger
through the binder fails.
"""
from __future__ import annotations

import asyncio
import dataclasses
import inspect
import logging
from typing import Any, Callable, Iterable, List, Optional, Tuple

from azrest.core.arguments import assert_not_none, assert_not_none_or_empty

from .models import QueueMessage
from .queues import QueueClient, QueueServiceClient

_logger = logging.getLogger(__name__)

_TRIGGER_ATTRIBUTE = "__azrest_queue_trigger__"


@dataclasses.dataclass(frozen=True)
class QueueTrigger:
    """Runs the function for each message that arrives on queue_name"""

    queue_name: str


@dataclasses.dataclass(frozen=True)
class Queue:
    """An output binding, binds to a QueueClient for queue_name"""

    queue_name: str


class BindingError(Exception):
    pass


class FunctionInvocationError(Exception):
    """A job function raised. The original exception is the __cause__"""

    def __init__(self, function_name: str, message_id: str):
        super().__init__(
            f"Exception while executing function: {function_name} (message "
            f"{message_id})"
        )
        self.function_name = function_name
        self.message_id = message_id


JobFunction = Callable[[QueueMessage, "Binder"], Any]


def queue_trigger(queue_name: str) -> Callable[[JobFunction], JobFunction]:
    """Decorator that marks a function as triggered by messages on queue_name"""
    assert_not_none_or_empty(queue_name, "queue_name")

    def decorator(func: JobFunction) -> JobFunction:
        setattr(func, _TRIGGER_ATTRIBUTE, QueueTrigger(queue_name))
        return func

    return decorator


def get_queue_trigger(func: Callable) -> Optional[QueueTrigger]:
    return getattr(func, _TRIGGER_ATTRIBUTE, None)


class Binder:
    """Binds attributes imperatively from inside a job function"""

    def __init__(self, queue_service: QueueServiceClient):
        self._queue_service = queue_service

    def bind(self, attribute: Any) -> Any:
        assert_not_none(attribute, "attribute")
        if isinstance(attribute, Queue):
            return self._queue_service.get_queue_client(attribute.queue_name)

        raise BindingError(
            f"No binding found for attribute '{type(attribute).__name__}'."
        )


class JobHost:
    """
    Dispatches queue messages to job functions. Each run_once* call receives up to
    batch_size messages from each trigger queue and invokes the corresponding function
    once per message. A message is deleted only after its function returns.
    """

    def __init__(
        self,
        queue_service: QueueServiceClient,
        functions: Iterable[JobFunction],
        *,
        batch_size: int = 16,
        visibility_timeout_secs: int = 30,
    ):
        assert_not_none(queue_service, "queue_service")
        self._queue_service = queue_service
        self._batch_size = batch_size
        self._visibility_timeout_secs = visibility_timeout_secs

        self._functions: List[Tuple[JobFunction, QueueClient]] = []
        for func in functions:
            trigger = get_queue_trigger(func)
            if trigger is None:
                raise ValueError(
                    f"{func.__name__} is not a job function, decorate it with "
                    "queue_trigger"
                )
            self._functions.append(
                (func, queue_service.get_queue_client(trigger.queue_name))
            )
        self._async_function_names = [
            func.__name__
            for func, _ in self._functions
            if inspect.iscoroutinefunction(func)
        ]

    def _invoke(self, func: JobFunction, message: QueueMessage) -> Any:
        _logger.info("Executing %s (message %s)", func.__name__, message.message_id)
        try:
            return func(message, Binder(self._queue_service))
        except Exception as e:
            raise FunctionInvocationError(func.__name__, message.message_id) from e

    async def _invoke_async(self, func: JobFunction, message: QueueMessage) -> None:
        if not inspect.iscoroutinefunction(func):
            # sync functions may block, e.g. a bound Queue sends with requests
            await asyncio.get_running_loop().run_in_executor(
                None, self._invoke, func, message
            )
            return

        try:
            await self._invoke(func, message)
        except FunctionInvocationError:
            raise
        except Exception as e:
            raise FunctionInvocationError(func.__name__, message.message_id) from e

    def run_once(self) -> int:
        """Returns the number of messages processed. Job functions must be sync."""
        if self._async_function_names:
            raise ValueError(
                f"{', '.join(self._async_function_names)} are async, use run_once_async"
            )

        processed = 0
        for func, queue in self._functions:
            for message in queue.receive_messages(
                visibility_timeout_secs=self._visibility_timeout_secs,
                num_messages=self._batch_size,
            ):
                self._invoke(func, message)
                queue.delete_message(message.message_id, message.pop_receipt)
                processed += 1
        return processed

    async def run_once_async(self) -> int:
        """
        Returns the number of messages processed. Job functions may be async, sync
        functions run on the default executor.
        """
        return await self._run_pass_async(raise_on_failure=True)

    async def _run_pass_async(self, raise_on_failure: bool) -> int:
        processed = 0
        for func, queue in self._functions:
            for message in await queue.receive_messages_async(
                visibility_timeout_secs=self._visibility_timeout_secs,
                num_messages=self._batch_size,
            ):
                try:
                    await self._invoke_async(func, message)
                except FunctionInvocationError:
                    if raise_on_failure:
                        raise
                    # the message stays on the queue and becomes visible again after
                    # the visibility timeout
                    _logger.error(
                        "Job function %s failed on message %s",
                        func.__name__,
                        message.message_id,
                        exc_info=True,
                    )
                    continue

                await queue.delete_message_async(
                    message.message_id, message.pop_receipt
                )
                processed += 1
        return processed

    async def run_async(self, poll_interval_secs: float = 5) -> None:
        """
        Runs until cancelled. A failing job function is logged and does not stop the
        host or the rest of its batch. Sleeps for poll_interval_secs whenever a pass
        processes no messages, otherwise goes straight on to the next pass.
        """
        while True:
            if await self._run_pass_async(raise_on_failure=False) == 0:
                await asyncio.sleep(poll_interval_secs)
