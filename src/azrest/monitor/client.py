from __future__ import annotations

from typing import Any, List, Optional, Sequence

from azrest.core.arguments import assert_not_none
from azrest.core.constants import MONITOR_DEFAULT_HOST
from azrest.core.pipeline import HttpPipeline

from .models import TelemetryItem, TrackResponse

_TRACK_PATH = "v2.1/track"


def _track_body(body: Sequence[TelemetryItem]) -> List[Any]:
    assert_not_none(body, "body")
    return [item.to_json() for item in body]


class AzureMonitorClient:
    """
    Sends telemetry to the Application Insights ingestion endpoint. The endpoint is not
    authorized, each TelemetryItem carries its own instrumentation key.
    """

    def __init__(
        self, host: str = MONITOR_DEFAULT_HOST, *, timeout: Optional[float] = None
    ):
        self._pipeline = HttpPipeline(host, None, None, timeout=timeout)

    def track(self, body: Sequence[TelemetryItem]) -> TrackResponse:
        """
        Sends a batch of telemetry items. A 206 (partial success) is not an error: the
        returned TrackResponse.errors says which items were rejected.
        """
        return TrackResponse.from_json(
            self._pipeline.request_object(
                "POST", _TRACK_PATH, json_content=_track_body(body)
            )
        )

    async def track_async(self, body: Sequence[TelemetryItem]) -> TrackResponse:
        """See track"""
        return TrackResponse.from_json(
            await self._pipeline.request_object_async(
                "POST", _TRACK_PATH, json_content=_track_body(body)
            )
        )
