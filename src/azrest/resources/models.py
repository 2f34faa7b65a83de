from __future__ import annotations

import dataclasses
from typing import Any, Dict, List, Optional

from azrest.core.arguments import assert_not_none
from azrest.core.serialization import from_json_list, set_if_defined, to_json_list


@dataclasses.dataclass
class EnvironmentVariable:
    """The environment variable to pass to the script in the container instance"""

    name: str
    value: Optional[str] = None
    # the value of a secure environment variable, never returned by the service
    secure_value: Optional[str] = None

    def __post_init__(self) -> None:
        assert_not_none(self.name, "name")

    def to_json(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"name": self.name}
        set_if_defined(result, "value", self.value)
        set_if_defined(result, "secureValue", self.secure_value)
        return result

    @classmethod
    def from_json(cls, json: Dict[str, Any]) -> EnvironmentVariable:
        return cls(
            name=json["name"],
            value=json.get("value"),
            secure_value=json.get("secureValue"),
        )


AZURE_CLI_KIND = "AzureCLI"


@dataclasses.dataclass
class DeploymentScript:
    """
    An Azure CLI deployment script. retention_interval and timeout are ISO 8601
    durations, e.g. P1D and PT30M. id, name, type, provisioning_state and outputs are
    set by the service and are never sent.
    """

    location: Optional[str] = None
    kind: str = AZURE_CLI_KIND
    identity: Optional[Dict[str, Any]] = None
    az_cli_version: Optional[str] = None
    script_content: Optional[str] = None
    arguments: Optional[str] = None
    environment_variables: Optional[List[EnvironmentVariable]] = None
    retention_interval: Optional[str] = None
    timeout: Optional[str] = None
    tags: Optional[Dict[str, str]] = None
    provisioning_state: Optional[str] = None
    outputs: Optional[Dict[str, Any]] = None
    id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        properties: Dict[str, Any] = {}
        set_if_defined(properties, "azCliVersion", self.az_cli_version)
        set_if_defined(properties, "scriptContent", self.script_content)
        set_if_defined(properties, "arguments", self.arguments)
        set_if_defined(
            properties,
            "environmentVariables",
            to_json_list(self.environment_variables),
        )
        set_if_defined(properties, "retentionInterval", self.retention_interval)
        set_if_defined(properties, "timeout", self.timeout)

        result: Dict[str, Any] = {"kind": self.kind, "properties": properties}
        set_if_defined(result, "location", self.location)
        set_if_defined(result, "identity", self.identity)
        set_if_defined(result, "tags", self.tags)
        return result

    @classmethod
    def from_json(cls, json: Dict[str, Any]) -> DeploymentScript:
        properties = json.get("properties") or {}
        return cls(
            location=json.get("location"),
            kind=json.get("kind", AZURE_CLI_KIND),
            identity=json.get("identity"),
            az_cli_version=properties.get("azCliVersion"),
            script_content=properties.get("scriptContent"),
            arguments=properties.get("arguments"),
            environment_variables=from_json_list(
                properties.get("environmentVariables"), EnvironmentVariable.from_json
            ),
            retention_interval=properties.get("retentionInterval"),
            timeout=properties.get("timeout"),
            tags=json.get("tags"),
            provisioning_state=properties.get("provisioningState"),
            outputs=properties.get("outputs"),
            id=json.get("id"),
            name=json.get("name"),
            type=json.get("type"),
        )
