"""Azure Database for MySQL management: recommended actions of server advisors"""

from .client import MySQLManagementClient
from .models import RecommendationAction
from .operations import RecommendedActionsOperations

__all__ = [
    "MySQLManagementClient",
    "RecommendationAction",
    "RecommendedActionsOperations",
]
