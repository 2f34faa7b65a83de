"""
Figures out which subscription to use when the caller doesn't specify one: the
AZURE_SUBSCRIPTION_ID environment variable, then the subscription the Azure CLI is
logged in to, then the only enabled subscription.
"""
from __future__ import annotations

import os
from typing import Any, List, Optional, cast

from .constants import (
    AZURE_SUBSCRIPTION_ID,
    MANAGEMENT_BASE_URL,
    SUBSCRIPTIONS_API_VERSION,
)
from .credentials import TokenCredential
from .paging import iterate_pages, iterate_pages_async
from .pipeline import HttpPipeline


def _choose_subscription(subscriptions: List[Any]) -> str:
    enabled = [sub for sub in subscriptions if sub.get("state") == "Enabled"]
    if len(enabled) > 1:
        raise ValueError(
            f"Please specify a subscription via the {AZURE_SUBSCRIPTION_ID} "
            "environment variable from among the available subscription ids: "
            + ", ".join([sub["subscriptionId"] for sub in enabled])
        )
    elif len(enabled) == 0:
        raise ValueError("There are no subscriptions available")
    else:
        return cast(str, enabled[0]["subscriptionId"])


def _from_environment_or_credential(credential: TokenCredential) -> Optional[str]:
    subscription_id = os.environ.get(AZURE_SUBSCRIPTION_ID)
    if subscription_id:
        return subscription_id
    # the CLI token comes with the subscription the CLI is using
    return getattr(credential, "subscription_id", None)


def get_subscription_id(
    credential: TokenCredential, base_url: str = MANAGEMENT_BASE_URL
) -> str:
    subscription_id = _from_environment_or_credential(credential)
    if subscription_id:
        return subscription_id

    credential.get_token()
    subscription_id = _from_environment_or_credential(credential)
    if subscription_id:
        return subscription_id

    pipeline = HttpPipeline(base_url, credential, SUBSCRIPTIONS_API_VERSION)
    return _choose_subscription(
        list(
            iterate_pages(
                pipeline.request_paged("GET", "subscriptions"),
                lambda next_link: pipeline.request_paged("GET", next_link),
            )
        )
    )


async def get_subscription_id_async(
    credential: TokenCredential, base_url: str = MANAGEMENT_BASE_URL
) -> str:
    subscription_id = _from_environment_or_credential(credential)
    if subscription_id:
        return subscription_id

    await credential.get_token_async()
    subscription_id = _from_environment_or_credential(credential)
    if subscription_id:
        return subscription_id

    pipeline = HttpPipeline(base_url, credential, SUBSCRIPTIONS_API_VERSION)
    subscriptions = [
        sub
        async for sub in iterate_pages_async(
            await pipeline.request_paged_async("GET", "subscriptions"),
            lambda next_link: pipeline.request_paged_async("GET", next_link),
        )
    ]
    return _choose_subscription(subscriptions)
