"""Docker Cloud container discovery."""

from .cloud_client import DockerCloudClient
from .discovery import discover_containers, fetch_full_container_detail, get_containers_to_balance
from .models import ContainerEnv, ContainerEnvVar, ContainerRecord, ContainerState, ContainerSummary

__all__ = [
    'DockerCloudClient',
    'discover_containers',
    'fetch_full_container_detail',
    'get_containers_to_balance',
    'ContainerEnv',
    'ContainerEnvVar',
    'ContainerRecord',
    'ContainerState',
    'ContainerSummary',
]
