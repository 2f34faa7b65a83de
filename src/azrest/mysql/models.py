from __future__ import annotations

import dataclasses
import datetime
from typing import Any, Dict, Optional

from azrest.core.serialization import format_datetime, parse_datetime, set_if_defined


@dataclasses.dataclass
class RecommendationAction:
    """
    A recommendation made by a server advisor. id, name and type are set by the service.
    """

    advisor_name: Optional[str] = None
    session_id: Optional[str] = None
    action_id: Optional[int] = None
    created_time: Optional[datetime.datetime] = None
    expiration_time: Optional[datetime.datetime] = None
    reason: Optional[str] = None
    recommendation_type: Optional[str] = None
    details: Optional[Dict[str, str]] = None
    id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        properties: Dict[str, Any] = {}
        set_if_defined(properties, "advisorName", self.advisor_name)
        set_if_defined(properties, "sessionId", self.session_id)
        set_if_defined(properties, "actionId", self.action_id)
        set_if_defined(properties, "createdTime", format_datetime(self.created_time))
        set_if_defined(
            properties, "expirationTime", format_datetime(self.expiration_time)
        )
        set_if_defined(properties, "reason", self.reason)
        set_if_defined(properties, "recommendationType", self.recommendation_type)
        set_if_defined(properties, "details", self.details)
        return {"properties": properties}

    @classmethod
    def from_json(cls, json: Dict[str, Any]) -> RecommendationAction:
        properties = json.get("properties") or {}
        return cls(
            advisor_name=properties.get("advisorName"),
            session_id=properties.get("sessionId"),
            action_id=properties.get("actionId"),
            created_time=parse_datetime(properties.get("createdTime")),
            expiration_time=parse_datetime(properties.get("expirationTime")),
            reason=properties.get("reason"),
            recommendation_type=properties.get("recommendationType"),
            details=properties.get("details"),
            id=json.get("id"),
            name=json.get("name"),
            type=json.get("type"),
        )
