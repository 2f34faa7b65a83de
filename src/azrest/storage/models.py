from __future__ import annotations

import dataclasses
import datetime
from typing import Any, Dict, List, Optional

from azrest.core.serialization import (
    from_json_list,
    from_json_optional,
    set_if_defined,
    to_json_list,
)


@dataclasses.dataclass
class CorsRule:
    """Specifies a CORS rule for the queue service"""

    allowed_origins: List[str]
    allowed_methods: List[str]
    max_age_in_seconds: int
    exposed_headers: List[str]
    allowed_headers: List[str]

    def to_json(self) -> Dict[str, Any]:
        return {
            "allowedOrigins": self.allowed_origins,
            "allowedMethods": self.allowed_methods,
            "maxAgeInSeconds": self.max_age_in_seconds,
            "exposedHeaders": self.exposed_headers,
            "allowedHeaders": self.allowed_headers,
        }

    @classmethod
    def from_json(cls, json: Dict[str, Any]) -> CorsRule:
        return cls(
            allowed_origins=json.get("allowedOrigins", []),
            allowed_methods=json.get("allowedMethods", []),
            max_age_in_seconds=json.get("maxAgeInSeconds", 0),
            exposed_headers=json.get("exposedHeaders", []),
            allowed_headers=json.get("allowedHeaders", []),
        )


@dataclasses.dataclass
class CorsRules:
    """Up to five CorsRule elements. An empty list deletes all CORS rules."""

    cors_rules: Optional[List[CorsRule]] = None

    def to_json(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        set_if_defined(result, "corsRules", to_json_list(self.cors_rules))
        return result

    @classmethod
    def from_json(cls, json: Dict[str, Any]) -> CorsRules:
        return cls(cors_rules=from_json_list(json.get("corsRules"), CorsRule.from_json))


@dataclasses.dataclass
class QueueServiceProperties:
    """
    The properties of a storage account's queue service. id, name and type are set by
    the service and are never sent.
    """

    cors: Optional[CorsRules] = None
    id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        properties: Dict[str, Any] = {}
        if self.cors is not None:
            properties["cors"] = self.cors.to_json()
        return {"properties": properties}

    @classmethod
    def from_json(cls, json: Dict[str, Any]) -> QueueServiceProperties:
        properties = json.get("properties") or {}
        return cls(
            cors=from_json_optional(properties.get("cors"), CorsRules.from_json),
            id=json.get("id"),
            name=json.get("name"),
            type=json.get("type"),
        )


@dataclasses.dataclass
class QueueMessage:
    message_id: str
    pop_receipt: str
    content: bytes
    dequeue_count: Optional[int] = None
    insertion_time: Optional[datetime.datetime] = None
    expiration_time: Optional[datetime.datetime] = None
