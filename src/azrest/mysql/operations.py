from __future__ import annotations

from typing import AsyncIterator, Dict, Iterator, Optional

from azrest.core.arguments import assert_not_none_or_empty, quote_path_segment
from azrest.core.paging import Page, iterate_pages, iterate_pages_async
from azrest.core.pipeline import HttpPipeline

from .models import RecommendationAction


def _to_recommendation_page(page: Page) -> Page[RecommendationAction]:
    return Page(
        [RecommendationAction.from_json(value) for value in page.values],
        page.next_link,
    )


class RecommendedActionsOperations:
    """
    Retrieves recommended actions from the advisors of an Azure Database for MySQL
    server. Don't construct this directly, use
    MySQLManagementClient.recommended_actions.
    """

    def __init__(self, pipeline: HttpPipeline, subscription_id: str):
        self._pipeline = pipeline
        self._subscription_id = subscription_id

    def _advisor_path(
        self, resource_group_name: str, server_name: str, advisor_name: str
    ) -> str:
        assert_not_none_or_empty(resource_group_name, "resource_group_name")
        assert_not_none_or_empty(server_name, "server_name")
        assert_not_none_or_empty(advisor_name, "advisor_name")
        return (
            f"subscriptions/{quote_path_segment(self._subscription_id)}"
            f"/resourceGroups/{quote_path_segment(resource_group_name)}"
            "/providers/Microsoft.DBforMySQL"
            f"/servers/{quote_path_segment(server_name)}"
            f"/advisors/{quote_path_segment(advisor_name)}/recommendedActions"
        )

    def _action_path(
        self,
        resource_group_name: str,
        server_name: str,
        advisor_name: str,
        recommended_action_name: str,
    ) -> str:
        path = self._advisor_path(resource_group_name, server_name, advisor_name)
        assert_not_none_or_empty(recommended_action_name, "recommended_action_name")
        return f"{path}/{quote_path_segment(recommended_action_name)}"

    @staticmethod
    def _session_parameters(session_id: Optional[str]) -> Dict[str, str]:
        if session_id is None:
            return {}
        return {"sessionId": session_id}

    def get(
        self,
        resource_group_name: str,
        server_name: str,
        advisor_name: str,
        recommended_action_name: str,
    ) -> RecommendationAction:
        """
        Retrieve a recommended action from the advisor. resource_group_name is case
        insensitive.
        """
        path = self._action_path(
            resource_group_name, server_name, advisor_name, recommended_action_name
        )
        return RecommendationAction.from_json(
            self._pipeline.request_object("GET", path)
        )

    async def get_async(
        self,
        resource_group_name: str,
        server_name: str,
        advisor_name: str,
        recommended_action_name: str,
    ) -> RecommendationAction:
        """See get"""
        path = self._action_path(
            resource_group_name, server_name, advisor_name, recommended_action_name
        )
        return RecommendationAction.from_json(
            await self._pipeline.request_object_async("GET", path)
        )

    def list_by_server(
        self,
        resource_group_name: str,
        server_name: str,
        advisor_name: str,
        session_id: Optional[str] = None,
    ) -> Page[RecommendationAction]:
        """
        Retrieve the first page of recommended actions from the advisor, optionally
        restricted to one recommendation session. Use list_by_server_next with
        next_link to get the following pages.
        """
        path = self._advisor_path(resource_group_name, server_name, advisor_name)
        return _to_recommendation_page(
            self._pipeline.request_paged(
                "GET", path, query_parameters=self._session_parameters(session_id)
            )
        )

    async def list_by_server_async(
        self,
        resource_group_name: str,
        server_name: str,
        advisor_name: str,
        session_id: Optional[str] = None,
    ) -> Page[RecommendationAction]:
        """See list_by_server"""
        path = self._advisor_path(resource_group_name, server_name, advisor_name)
        return _to_recommendation_page(
            await self._pipeline.request_paged_async(
                "GET", path, query_parameters=self._session_parameters(session_id)
            )
        )

    def list_by_server_next(self, next_page_link: str) -> Page[RecommendationAction]:
        """next_page_link is the next_link from the previous list_by_server call"""
        assert_not_none_or_empty(next_page_link, "next_page_link")
        return _to_recommendation_page(
            self._pipeline.request_paged("GET", next_page_link)
        )

    async def list_by_server_next_async(
        self, next_page_link: str
    ) -> Page[RecommendationAction]:
        assert_not_none_or_empty(next_page_link, "next_page_link")
        return _to_recommendation_page(
            await self._pipeline.request_paged_async("GET", next_page_link)
        )

    def iterate_by_server(
        self,
        resource_group_name: str,
        server_name: str,
        advisor_name: str,
        session_id: Optional[str] = None,
    ) -> Iterator[RecommendationAction]:
        """Walks every page of list_by_server"""
        return iterate_pages(
            self.list_by_server(
                resource_group_name, server_name, advisor_name, session_id
            ),
            self.list_by_server_next,
        )

    async def iterate_by_server_async(
        self,
        resource_group_name: str,
        server_name: str,
        advisor_name: str,
        session_id: Optional[str] = None,
    ) -> AsyncIterator[RecommendationAction]:
        first_page = await self.list_by_server_async(
            resource_group_name, server_name, advisor_name, session_id
        )
        async for action in iterate_pages_async(
            first_page, self.list_by_server_next_async
        ):
            yield action
