from __future__ import annotations

import dataclasses
import datetime
from typing import Any, Dict, List, Optional

from azrest.core.arguments import assert_not_none
from azrest.core.serialization import (
    format_datetime,
    from_json_list,
    from_json_optional,
    parse_datetime,
    set_if_defined,
)


@dataclasses.dataclass
class MonitorDomain:
    """The abstract common base of all domains"""

    # Ignored value
    test: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        set_if_defined(result, "test", self.test)
        return result

    @classmethod
    def from_json(cls, json: Dict[str, Any]) -> MonitorDomain:
        return cls(test=json.get("test"))


@dataclasses.dataclass
class MessageData(MonitorDomain):
    """Instances of Message represent printf-like trace statements"""

    message: Optional[str] = None
    version: int = 2
    severity_level: Optional[str] = None
    properties: Optional[Dict[str, str]] = None

    def to_json(self) -> Dict[str, Any]:
        result = super().to_json()
        result["ver"] = self.version
        set_if_defined(result, "message", self.message)
        set_if_defined(result, "severityLevel", self.severity_level)
        set_if_defined(result, "properties", self.properties)
        return result

    @classmethod
    def from_json(cls, json: Dict[str, Any]) -> MessageData:
        return cls(
            test=json.get("test"),
            message=json.get("message"),
            version=json.get("ver", 2),
            severity_level=json.get("severityLevel"),
            properties=json.get("properties"),
        )


_DOMAIN_TYPES = {"MessageData": MessageData}


@dataclasses.dataclass
class MonitorBase:
    """Data struct to contain only C section with custom fields"""

    base_type: Optional[str] = None
    base_data: Optional[MonitorDomain] = None

    def to_json(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        set_if_defined(result, "baseType", self.base_type)
        if self.base_data is not None:
            result["baseData"] = self.base_data.to_json()
        return result

    @classmethod
    def from_json(cls, json: Dict[str, Any]) -> MonitorBase:
        base_type = json.get("baseType")
        domain_type = _DOMAIN_TYPES.get(base_type or "", MonitorDomain)
        return cls(
            base_type=base_type,
            base_data=from_json_optional(json.get("baseData"), domain_type.from_json),
        )


@dataclasses.dataclass
class TelemetryItem:
    """System variables for a telemetry item"""

    name: str
    time: datetime.datetime
    instrumentation_key: Optional[str] = None
    data: Optional[MonitorBase] = None
    version: int = 1
    sample_rate: Optional[float] = None
    sequence: Optional[str] = None
    tags: Optional[Dict[str, str]] = None

    def __post_init__(self) -> None:
        assert_not_none(self.name, "name")
        assert_not_none(self.time, "time")

    def to_json(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "ver": self.version,
            "name": self.name,
            "time": format_datetime(self.time),
        }
        set_if_defined(result, "sampleRate", self.sample_rate)
        set_if_defined(result, "seq", self.sequence)
        set_if_defined(result, "iKey", self.instrumentation_key)
        set_if_defined(result, "tags", self.tags)
        if self.data is not None:
            result["data"] = self.data.to_json()
        return result

    @classmethod
    def from_json(cls, json: Dict[str, Any]) -> TelemetryItem:
        return cls(
            name=json["name"],
            time=parse_datetime(json["time"]),  # type: ignore[arg-type]
            instrumentation_key=json.get("iKey"),
            data=from_json_optional(json.get("data"), MonitorBase.from_json),
            version=json.get("ver", 1),
            sample_rate=json.get("sampleRate"),
            sequence=json.get("seq"),
            tags=json.get("tags"),
        )


@dataclasses.dataclass
class TelemetryErrorDetails:
    """The error details for one rejected telemetry item"""

    index: Optional[int] = None
    status_code: Optional[int] = None
    message: Optional[str] = None

    @classmethod
    def from_json(cls, json: Dict[str, Any]) -> TelemetryErrorDetails:
        return cls(
            index=json.get("index"),
            status_code=json.get("statusCode"),
            message=json.get("message"),
        )


@dataclasses.dataclass
class TrackResponse:
    """Response containing the status of each telemetry item"""

    items_received: Optional[int] = None
    items_accepted: Optional[int] = None
    errors: Optional[List[TelemetryErrorDetails]] = None

    @classmethod
    def from_json(cls, json: Dict[str, Any]) -> TrackResponse:
        return cls(
            items_received=json.get("itemsReceived"),
            items_accepted=json.get("itemsAccepted"),
            errors=from_json_list(json.get("errors"), TelemetryErrorDetails.from_json),
        )
