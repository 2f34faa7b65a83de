from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from azrest.resources import (
    DeploymentScript,
    EnvironmentVariable,
    ResourceManagementClient,
)
from http_helpers import (
    StaticTokenCredential,
    empty_response,
    install_transport,
    json_response,
)

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


_SCRIPTS_URL = (
    "https://management.azure.com/subscriptions/sub-id/resourceGroups/script-rg"
    "/providers/Microsoft.Resources/deploymentScripts"
)


def _script_json(provisioning_state: str) -> dict:
    return {
        "id": "/subscriptions/sub-id/.../deploymentScripts/my-script",
        "name": "my-script",
        "type": "Microsoft.Resources/deploymentScripts",
        "kind": "AzureCLI",
        "location": "westus",
        "properties": {
            "azCliVersion": "2.0.80",
            "scriptContent": "echo $GREETING",
            "environmentVariables": [
                {"name": "GREETING", "value": "hello"},
                {"name": "TOKEN"},
            ],
            "retentionInterval": "P1D",
            "timeout": "PT30M",
            "provisioningState": provisioning_state,
            "outputs": {"text": "hello"},
        },
    }


def _client() -> ResourceManagementClient:
    return ResourceManagementClient(StaticTokenCredential(), "sub-id")


def _script() -> DeploymentScript:
    return DeploymentScript(
        location="westus",
        az_cli_version="2.0.80",
        script_content="echo $GREETING",
        environment_variables=[
            EnvironmentVariable("GREETING", value="hello"),
            EnvironmentVariable("TOKEN", secure_value="secret"),
        ],
        retention_interval="P1D",
        timeout="PT30M",
    )


def test_environment_variable() -> None:
    assert EnvironmentVariable("A", secure_value="s").to_json() == {
        "name": "A",
        "secureValue": "s",
    }
    with pytest.raises(ValueError):
        EnvironmentVariable(None)  # type: ignore[arg-type]


def test_deployment_script_json() -> None:
    assert _script().to_json() == {
        "kind": "AzureCLI",
        "location": "westus",
        "properties": {
            "azCliVersion": "2.0.80",
            "scriptContent": "echo $GREETING",
            "environmentVariables": [
                {"name": "GREETING", "value": "hello"},
                {"name": "TOKEN", "secureValue": "secret"},
            ],
            "retentionInterval": "P1D",
            "timeout": "PT30M",
        },
    }

    script = DeploymentScript.from_json(_script_json("Succeeded"))
    assert script.provisioning_state == "Succeeded"
    assert script.outputs == {"text": "hello"}
    assert script.environment_variables is not None
    assert script.environment_variables[1].value is None
    # read-only fields aren't sent back
    assert "provisioningState" not in script.to_json()["properties"]
    assert "id" not in script.to_json()


def test_get_and_list(mocker: MockerFixture) -> None:
    transport = install_transport(
        mocker,
        json_response(_script_json("Succeeded")),
        json_response(
            {
                "value": [_script_json("Succeeded")],
                "nextLink": f"{_SCRIPTS_URL}?api-version=2019-10-01-preview&page=2",
            }
        ),
        json_response({"value": [_script_json("Failed")]}),
    )
    operations = _client().deployment_scripts

    script = operations.get("script-rg", "my-script")
    assert transport.requests[0].url == f"{_SCRIPTS_URL}/my-script"
    assert transport.requests[0].params == {"api-version": "2019-10-01-preview"}
    assert script.name == "my-script"

    page = operations.list_by_resource_group("script-rg")
    assert len(page) == 1
    assert page.next_link is not None
    page = operations.list_by_resource_group_next(page.next_link)
    assert [s.provisioning_state for s in page] == ["Failed"]
    assert page.next_link is None


def test_delete(mocker: MockerFixture) -> None:
    transport = install_transport(mocker, empty_response(204))
    _client().deployment_scripts.delete("script-rg", "my-script")
    assert transport.requests[0].method == "DELETE"
    assert transport.requests[0].url == f"{_SCRIPTS_URL}/my-script"


def test_argument_validation(mocker: MockerFixture) -> None:
    transport = install_transport(mocker)
    operations = _client().deployment_scripts
    with pytest.raises(ValueError):
        operations.get("script-rg", "")
    with pytest.raises(ValueError):
        operations.list_by_resource_group(None)  # type: ignore[arg-type]
    assert transport.requests == []


@pytest.mark.asyncio
async def test_create_async(mocker: MockerFixture) -> None:
    mocker.patch("azrest.core.pipeline.asyncio.sleep", return_value=None)
    operation_url = (
        "https://management.azure.com/subscriptions/sub-id/providers"
        "/Microsoft.Resources/locations/westus/deploymentScriptOperationResults/1"
        "?api-version=2019-10-01-preview"
    )
    transport = install_transport(
        mocker,
        json_response(
            _script_json("Creating"),
            status=201,
            headers={"Azure-AsyncOperation": operation_url, "Retry-After": "5"},
        ),
        json_response({"status": "Running"}),
        json_response({"status": "Succeeded"}),
        json_response(_script_json("Succeeded")),
    )

    script = await _client().deployment_scripts.create_async(
        "script-rg", "my-script", _script()
    )
    assert script.provisioning_state == "Succeeded"

    put, *polls, get = transport.requests
    assert put.method == "PUT"
    assert put.url == f"{_SCRIPTS_URL}/my-script"
    assert put.json == _script().to_json()
    assert [p.url for p in polls] == [operation_url, operation_url]
    assert get.method == "GET"


@pytest.mark.asyncio
async def test_begin_create_async_completed(mocker: MockerFixture) -> None:
    install_transport(mocker, json_response(_script_json("Succeeded"), status=200))
    script, continuation = await _client().deployment_scripts.begin_create_async(
        "script-rg", "my-script", _script()
    )
    assert script.provisioning_state == "Succeeded"
    assert continuation is None


@pytest.mark.asyncio
async def test_delete_async(mocker: MockerFixture) -> None:
    transport = install_transport(mocker, empty_response(200))
    await _client().deployment_scripts.delete_async("script-rg", "my-script")
    assert transport.requests[0].method == "DELETE"
