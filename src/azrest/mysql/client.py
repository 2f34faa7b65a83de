from __future__ import annotations

from typing import Optional

from azrest.core.arguments import assert_not_none, assert_not_none_or_empty
from azrest.core.constants import MANAGEMENT_BASE_URL, MYSQL_API_VERSION
from azrest.core.credentials import TokenCredential
from azrest.core.pipeline import HttpPipeline

from .operations import RecommendedActionsOperations


class MySQLManagementClient:
    """
    The Microsoft Azure management API for Azure Database for MySQL. Only the
    recommended actions operations are available.
    """

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
            base_url, credential, MYSQL_API_VERSION, timeout=timeout
        )
        self.recommended_actions = RecommendedActionsOperations(
            self._pipeline, subscription_id
        )
