from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from azrest.core.constants import AZURE_SUBSCRIPTION_ID
from azrest.core.credentials import AccessToken
from azrest.core.subscriptions import get_subscription_id, get_subscription_id_async
from http_helpers import StaticTokenCredential, install_transport, json_response

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


def _subscription(subscription_id: str, state: str = "Enabled") -> dict:
    return {"subscriptionId": subscription_id, "state": state}


def test_from_environment(
    monkeypatch: pytest.MonkeyPatch, mocker: MockerFixture
) -> None:
    monkeypatch.setenv(AZURE_SUBSCRIPTION_ID, "env-sub")
    transport = install_transport(mocker)
    credential = StaticTokenCredential()
    assert get_subscription_id(credential) == "env-sub"
    assert transport.requests == []
    assert credential.num_requests == 0


def test_from_cli_credential(
    monkeypatch: pytest.MonkeyPatch, mocker: MockerFixture
) -> None:
    monkeypatch.delenv(AZURE_SUBSCRIPTION_ID, raising=False)
    install_transport(mocker)
    credential = StaticTokenCredential()

    def request_token(scope: str) -> AccessToken:
        # like AzureCliCredential, the subscription is only known after a token
        credential.subscription_id = "cli-sub"  # type: ignore[attr-defined]
        return StaticTokenCredential._request_token(credential, scope)

    mocker.patch.object(credential, "_request_token", side_effect=request_token)
    assert get_subscription_id(credential) == "cli-sub"


def test_only_enabled_subscription(
    monkeypatch: pytest.MonkeyPatch, mocker: MockerFixture
) -> None:
    monkeypatch.delenv(AZURE_SUBSCRIPTION_ID, raising=False)
    transport = install_transport(
        mocker,
        json_response(
            {
                "value": [_subscription("disabled-sub", "Disabled")],
                "nextLink": "https://management.azure.com/subscriptions?page=2",
            }
        ),
        json_response({"value": [_subscription("the-sub")]}),
    )
    assert get_subscription_id(StaticTokenCredential()) == "the-sub"
    assert transport.requests[0].params == {"api-version": "2021-01-01"}


def test_ambiguous_subscription(
    monkeypatch: pytest.MonkeyPatch, mocker: MockerFixture
) -> None:
    monkeypatch.delenv(AZURE_SUBSCRIPTION_ID, raising=False)
    install_transport(
        mocker,
        json_response({"value": [_subscription("sub-1"), _subscription("sub-2")]}),
    )
    with pytest.raises(ValueError, match="sub-1, sub-2"):
        get_subscription_id(StaticTokenCredential())


@pytest.mark.asyncio
async def test_no_subscription_async(
    monkeypatch: pytest.MonkeyPatch, mocker: MockerFixture
) -> None:
    monkeypatch.delenv(AZURE_SUBSCRIPTION_ID, raising=False)
    install_transport(mocker, json_response({"value": []}))
    with pytest.raises(ValueError, match="no subscriptions"):
        await get_subscription_id_async(StaticTokenCredential())
