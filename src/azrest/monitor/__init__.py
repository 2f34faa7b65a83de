"""Azure Monitor (Application Insights) telemetry export"""

from .client import AzureMonitorClient
from .models import (
    MessageData,
    MonitorBase,
    MonitorDomain,
    TelemetryErrorDetails,
    TelemetryItem,
    TrackResponse,
)

__all__ = [
    "AzureMonitorClient",
    "MessageData",
    "MonitorBase",
    "MonitorDomain",
    "TelemetryErrorDetails",
    "TelemetryItem",
    "TrackResponse",
]
