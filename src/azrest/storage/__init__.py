"""
Azure Storage: queue service properties (management plane), the queue data plane and
queue-triggered job functions.
"""

from .bindings import (
    Binder,
    BindingError,
    FunctionInvocationError,
    JobHost,
    Queue,
    QueueTrigger,
    get_queue_trigger,
    queue_trigger,
)
from .management import QueueServicesOperations, StorageManagementClient
from .models import CorsRule, CorsRules, QueueMessage, QueueServiceProperties
from .queues import QueueClient, QueueServiceClient

__all__ = [
    "Binder",
    "BindingError",
    "CorsRule",
    "CorsRules",
    "FunctionInvocationError",
    "JobHost",
    "Queue",
    "QueueClient",
    "QueueMessage",
    "QueueServiceClient",
    "QueueServiceProperties",
    "QueueServicesOperations",
    "QueueTrigger",
    "StorageManagementClient",
    "get_queue_trigger",
    "queue_trigger",
]
