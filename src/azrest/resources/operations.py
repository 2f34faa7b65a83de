from __future__ import annotations

from typing import Any, Coroutine, Optional, Tuple

from azrest.core.arguments import (
    assert_not_none,
    assert_not_none_or_empty,
    quote_path_segment,
)
from azrest.core.paging import Page
from azrest.core.pipeline import DEFAULT_TOTAL_POLL_TIMEOUT_SECONDS, HttpPipeline

from .models import DeploymentScript


def _to_script_page(page: Page) -> Page[DeploymentScript]:
    return Page(
        [DeploymentScript.from_json(value) for value in page.values], page.next_link
    )


class DeploymentScriptsOperations:
    """Use ResourceManagementClient.deployment_scripts"""

    def __init__(self, pipeline: HttpPipeline, subscription_id: str):
        self._pipeline = pipeline
        self._subscription_id = subscription_id

    def _resource_group_path(self, resource_group_name: str) -> str:
        assert_not_none_or_empty(resource_group_name, "resource_group_name")
        return (
            f"subscriptions/{quote_path_segment(self._subscription_id)}"
            f"/resourceGroups/{quote_path_segment(resource_group_name)}"
            "/providers/Microsoft.Resources/deploymentScripts"
        )

    def _script_path(self, resource_group_name: str, script_name: str) -> str:
        path = self._resource_group_path(resource_group_name)
        assert_not_none_or_empty(script_name, "script_name")
        return f"{path}/{quote_path_segment(script_name)}"

    def get(self, resource_group_name: str, script_name: str) -> DeploymentScript:
        return DeploymentScript.from_json(
            self._pipeline.request_object(
                "GET", self._script_path(resource_group_name, script_name)
            )
        )

    async def get_async(
        self, resource_group_name: str, script_name: str
    ) -> DeploymentScript:
        return DeploymentScript.from_json(
            await self._pipeline.request_object_async(
                "GET", self._script_path(resource_group_name, script_name)
            )
        )

    def list_by_resource_group(
        self, resource_group_name: str
    ) -> Page[DeploymentScript]:
        return _to_script_page(
            self._pipeline.request_paged(
                "GET", self._resource_group_path(resource_group_name)
            )
        )

    async def list_by_resource_group_async(
        self, resource_group_name: str
    ) -> Page[DeploymentScript]:
        return _to_script_page(
            await self._pipeline.request_paged_async(
                "GET", self._resource_group_path(resource_group_name)
            )
        )

    def list_by_resource_group_next(
        self, next_page_link: str
    ) -> Page[DeploymentScript]:
        assert_not_none_or_empty(next_page_link, "next_page_link")
        return _to_script_page(self._pipeline.request_paged("GET", next_page_link))

    async def list_by_resource_group_next_async(
        self, next_page_link: str
    ) -> Page[DeploymentScript]:
        assert_not_none_or_empty(next_page_link, "next_page_link")
        return _to_script_page(
            await self._pipeline.request_paged_async("GET", next_page_link)
        )

    async def begin_create_async(
        self,
        resource_group_name: str,
        script_name: str,
        deployment_script: DeploymentScript,
        *,
        total_timeout_seconds: float = DEFAULT_TOTAL_POLL_TIMEOUT_SECONDS,
    ) -> Tuple[DeploymentScript, Optional[Coroutine[Any, Any, Any]]]:
        """
        Creates or updates a deployment script. Returns the script as accepted by the
        service and, if the script is still running, a coroutine that completes (with
        the raw operation status) when it finishes. See HttpPipeline.poll_async.
        """
        path = self._script_path(resource_group_name, script_name)
        assert_not_none(deployment_script, "deployment_script")
        initial, continuation = await self._pipeline.poll_async(
            "PUT",
            path,
            "AsyncOperationJsonStatus",
            json_content=deployment_script.to_json(),
            total_timeout_seconds=total_timeout_seconds,
        )
        return DeploymentScript.from_json(initial), continuation

    async def create_async(
        self,
        resource_group_name: str,
        script_name: str,
        deployment_script: DeploymentScript,
        *,
        total_timeout_seconds: float = DEFAULT_TOTAL_POLL_TIMEOUT_SECONDS,
    ) -> DeploymentScript:
        """Like begin_create_async, but waits for the script to finish"""
        initial, continuation = await self.begin_create_async(
            resource_group_name,
            script_name,
            deployment_script,
            total_timeout_seconds=total_timeout_seconds,
        )
        if continuation is None:
            return initial
        await continuation
        return await self.get_async(resource_group_name, script_name)

    def delete(self, resource_group_name: str, script_name: str) -> None:
        self._pipeline.request(
            "DELETE", self._script_path(resource_group_name, script_name)
        )

    async def delete_async(self, resource_group_name: str, script_name: str) -> None:
        await self._pipeline.request_async(
            "DELETE", self._script_path(resource_group_name, script_name)
        )
