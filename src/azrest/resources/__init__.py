"""Azure Resource Manager: deployment scripts"""

from .client import ResourceManagementClient
from .models import DeploymentScript, EnvironmentVariable
from .operations import DeploymentScriptsOperations

__all__ = [
    "DeploymentScript",
    "DeploymentScriptsOperations",
    "EnvironmentVariable",
    "ResourceManagementClient",
]
