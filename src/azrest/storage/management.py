from __future__ import annotations

from typing import Optional

from azrest.core.arguments import (
    assert_not_none,
    assert_not_none_or_empty,
    quote_path_segment,
)
from azrest.core.constants import MANAGEMENT_BASE_URL, STORAGE_MANAGEMENT_API_VERSION
from azrest.core.credentials import TokenCredential
from azrest.core.pipeline import HttpPipeline

from .models import QueueServiceProperties


class QueueServicesOperations:
    """
    The management-plane properties of a storage account's queue service. Use
    StorageManagementClient.queue_services.
    """

    def __init__(self, pipeline: HttpPipeline, subscription_id: str):
        self._pipeline = pipeline
        self._subscription_id = subscription_id

    def _path(self, resource_group_name: str, account_name: str) -> str:
        assert_not_none_or_empty(resource_group_name, "resource_group_name")
        assert_not_none_or_empty(account_name, "account_name")
        return (
            f"subscriptions/{quote_path_segment(self._subscription_id)}"
            f"/resourceGroups/{quote_path_segment(resource_group_name)}"
            "/providers/Microsoft.Storage"
            f"/storageAccounts/{quote_path_segment(account_name)}"
            "/queueServices/default"
        )

    def get_service_properties(
        self, resource_group_name: str, account_name: str
    ) -> QueueServiceProperties:
        return QueueServiceProperties.from_json(
            self._pipeline.request_object(
                "GET", self._path(resource_group_name, account_name)
            )
        )

    async def get_service_properties_async(
        self, resource_group_name: str, account_name: str
    ) -> QueueServiceProperties:
        return QueueServiceProperties.from_json(
            await self._pipeline.request_object_async(
                "GET", self._path(resource_group_name, account_name)
            )
        )

    def set_service_properties(
        self,
        resource_group_name: str,
        account_name: str,
        parameters: QueueServiceProperties,
    ) -> QueueServiceProperties:
        """
        Sets the CORS rules of the queue service. Returns the properties as stored by
        the service.
        """
        path = self._path(resource_group_name, account_name)
        assert_not_none(parameters, "parameters")
        return QueueServiceProperties.from_json(
            self._pipeline.request_object(
                "PUT", path, json_content=parameters.to_json()
            )
        )

    async def set_service_properties_async(
        self,
        resource_group_name: str,
        account_name: str,
        parameters: QueueServiceProperties,
    ) -> QueueServiceProperties:
        path = self._path(resource_group_name, account_name)
        assert_not_none(parameters, "parameters")
        return QueueServiceProperties.from_json(
            await self._pipeline.request_object_async(
                "PUT", path, json_content=parameters.to_json()
            )
        )


class StorageManagementClient:
    def __init__(
        self,
        credential: TokenCredential,
        subscription_id: str,
        base_url: str = MANAGEMENT_BASE_URL,
        *,
        timeout: Optional[float] = None,
    ):
        assert_not_none(credential, "credential")
        assert_not_none_or_empty(subscription_id, "subscription_id")
        self.subscription_id = subscription_id
        self._pipeline = HttpPipeline(
            base_url, credential, STORAGE_MANAGEMENT_API_VERSION, timeout=timeout
        )
        self.queue_services = QueueServicesOperations(self._pipeline, subscription_id)
