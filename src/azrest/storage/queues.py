"""
The storage queue data plane: creating queues and sending, receiving and deleting
messages. Authorized with the account's shared key, works against Azurite too.
"""
from __future__ import annotations

import base64
import email.utils
import xml.dom.minidom
from typing import Dict, List, Optional

from azrest.core.arguments import assert_not_none, assert_not_none_or_empty
from azrest.core.constants import QUEUE_API_VERSION
from azrest.core.pipeline import HttpPipeline, deserialize_response
from azrest.core.storage_auth import StorageAccount
from azrest.core.transport import HttpRequest

from .models import QueueMessage

_QUEUE_MESSAGE_TEMPLATE = "<QueueMessage><MessageText>{}</MessageText></QueueMessage>"


def _parse_queue_messages(message_xml: str) -> List[Dict[str, str]]:
    """
    Parses a QueueMessagesList into one dictionary per QueueMessage, e.g.
    {"MessageId": ..., "PopReceipt": ..., "MessageText": ...}
    """
    try:
        results = []
        root_node = xml.dom.minidom.parseString(message_xml).documentElement
        if root_node.nodeName != "QueueMessagesList":
            raise ValueError("Expected root element to be QueueMessagesList")
        for message_node in root_node.childNodes:
            if message_node.nodeName == "QueueMessage":
                results.append(
                    {
                        attribute_node.nodeName: attribute_node.childNodes[0].nodeValue
                        for attribute_node in message_node.childNodes
                        if attribute_node.childNodes
                    }
                )
    except Exception as e:
        raise ValueError(f"Cannot parse XML: {message_xml}") from e

    return results


def _to_queue_message(
    fields: Dict[str, str], content: Optional[bytes] = None
) -> QueueMessage:
    for required in ("MessageId", "PopReceipt"):
        if required not in fields:
            raise ValueError(f"A QueueMessage was missing a {required}")

    if content is None:
        if "MessageText" not in fields:
            raise ValueError("A QueueMessage was missing a MessageText")
        content = base64.b64decode(fields["MessageText"])

    dequeue_count = fields.get("DequeueCount")
    insertion_time = fields.get("InsertionTime")
    expiration_time = fields.get("ExpirationTime")
    return QueueMessage(
        fields["MessageId"],
        fields["PopReceipt"],
        content,
        int(dequeue_count) if dequeue_count is not None else None,
        email.utils.parsedate_to_datetime(insertion_time) if insertion_time else None,
        email.utils.parsedate_to_datetime(expiration_time) if expiration_time else None,
    )


class QueueClient:
    """A single queue. Get one from QueueServiceClient.get_queue_client"""

    def __init__(self, pipeline: HttpPipeline, queue_name: str):
        assert_not_none_or_empty(queue_name, "queue_name")
        self._pipeline = pipeline
        self.queue_name = queue_name

    @property
    def url(self) -> str:
        return f"{self._pipeline.base_url}/{self.queue_name}"

    def _prepare(
        self,
        method: str,
        url_path: str,
        *,
        query_parameters: Optional[Dict[str, str]] = None,
        xml_content: Optional[str] = None,
    ) -> HttpRequest:
        return self._pipeline.prepare_request(
            method,
            url_path,
            query_parameters=query_parameters,
            headers={
                "x-ms-version": QUEUE_API_VERSION,
                "Content-Type": "application/xml",
            },
            data=xml_content,
        )

    def _prepare_create(self) -> HttpRequest:
        # https://docs.microsoft.com/en-us/rest/api/storageservices/create-queue4
        return self._prepare("PUT", self.queue_name)

    def _prepare_send(self, content: bytes) -> HttpRequest:
        # https://docs.microsoft.com/en-us/rest/api/storageservices/put-message
        assert_not_none(content, "content")
        return self._prepare(
            "POST",
            f"{self.queue_name}/messages",
            xml_content=_QUEUE_MESSAGE_TEMPLATE.format(
                base64.b64encode(content).decode("utf-8")
            ),
        )

    def _prepare_receive(
        self, visibility_timeout_secs: Optional[int], num_messages: Optional[int]
    ) -> HttpRequest:
        # https://docs.microsoft.com/en-us/rest/api/storageservices/get-messages
        query_parameters = {}
        if visibility_timeout_secs is not None:
            query_parameters["visibilitytimeout"] = str(visibility_timeout_secs)
        if num_messages is not None:
            query_parameters["numofmessages"] = str(num_messages)
        return self._prepare(
            "GET", f"{self.queue_name}/messages", query_parameters=query_parameters
        )

    def _prepare_delete_message(self, message_id: str, pop_receipt: str) -> HttpRequest:
        # https://docs.microsoft.com/en-us/rest/api/storageservices/delete-message2
        assert_not_none_or_empty(message_id, "message_id")
        assert_not_none_or_empty(pop_receipt, "pop_receipt")
        return self._prepare(
            "DELETE",
            f"{self.queue_name}/messages/{message_id}",
            query_parameters={"popreceipt": pop_receipt},
        )

    def create_if_not_exists(self) -> bool:
        """Returns True if the queue was created, False if it already existed"""
        response = self._pipeline.send(
            self._prepare_create(), ignored_status_codes=[(409, "QueueAlreadyExists")]
        )
        return response.status == 201

    async def create_if_not_exists_async(self) -> bool:
        response = await self._pipeline.send_async(
            self._prepare_create(), ignored_status_codes=[(409, "QueueAlreadyExists")]
        )
        return response.status == 201

    def delete(self) -> None:
        self._pipeline.send(self._prepare("DELETE", self.queue_name))

    async def delete_async(self) -> None:
        await self._pipeline.send_async(self._prepare("DELETE", self.queue_name))

    def send_message(self, content: bytes) -> QueueMessage:
        """
        Sends a message on this queue, returns the message as stored by the service
        """
        response = self._pipeline.send(self._prepare_send(content))
        return _to_queue_message(
            _parse_queue_messages(deserialize_response(response))[0], content
        )

    async def send_message_async(self, content: bytes) -> QueueMessage:
        response = await self._pipeline.send_async(self._prepare_send(content))
        return _to_queue_message(
            _parse_queue_messages(deserialize_response(response))[0], content
        )

    def receive_messages(
        self,
        *,
        visibility_timeout_secs: Optional[int] = None,
        num_messages: Optional[int] = None,
    ) -> List[QueueMessage]:
        """Receives 1 (the default) or more messages, can return an empty list"""
        response = self._pipeline.send(
            self._prepare_receive(visibility_timeout_secs, num_messages)
        )
        return [
            _to_queue_message(fields)
            for fields in _parse_queue_messages(deserialize_response(response))
        ]

    async def receive_messages_async(
        self,
        *,
        visibility_timeout_secs: Optional[int] = None,
        num_messages: Optional[int] = None,
    ) -> List[QueueMessage]:
        response = await self._pipeline.send_async(
            self._prepare_receive(visibility_timeout_secs, num_messages)
        )
        return [
            _to_queue_message(fields)
            for fields in _parse_queue_messages(deserialize_response(response))
        ]

    def delete_message(self, message_id: str, pop_receipt: str) -> None:
        self._pipeline.send(self._prepare_delete_message(message_id, pop_receipt))

    async def delete_message_async(self, message_id: str, pop_receipt: str) -> None:
        await self._pipeline.send_async(
            self._prepare_delete_message(message_id, pop_receipt)
        )


class QueueServiceClient:
    """The queue service of one storage account"""

    def __init__(self, account: StorageAccount, *, timeout: Optional[float] = None):
        assert_not_none(account, "account")
        self.account = account
        self._pipeline = HttpPipeline(
            account.queue_endpoint, account.credential(), None, timeout=timeout
        )

    @classmethod
    def from_connection_string(
        cls, connection_string: str, *, timeout: Optional[float] = None
    ) -> QueueServiceClient:
        assert_not_none_or_empty(connection_string, "connection_string")
        return cls(
            StorageAccount.from_connection_string(connection_string), timeout=timeout
        )

    def get_queue_client(self, queue_name: str) -> QueueClient:
        """The returned client shares this client's pipeline"""
        return QueueClient(self._pipeline, queue_name)
