from __future__ import annotations

from typing import Optional

from azrest.core.arguments import assert_not_none, assert_not_none_or_empty
from azrest.core.constants import DEPLOYMENT_SCRIPTS_API_VERSION, MANAGEMENT_BASE_URL
from azrest.core.credentials import TokenCredential
from azrest.core.pipeline import HttpPipeline

from .operations import DeploymentScriptsOperations


class ResourceManagementClient:
    """Azure Resource Manager, only deployment scripts are available"""

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
            base_url, credential, DEPLOYMENT_SCRIPTS_API_VERSION, timeout=timeout
        )
        self.deployment_scripts = DeploymentScriptsOperations(
            self._pipeline, subscription_id
        )
