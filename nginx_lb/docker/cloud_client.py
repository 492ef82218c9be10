"""Async Docker Cloud API client for container discovery."""

import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from .models import ContainerRecord, ContainerSummary
from ..shared.config import Config
from ..shared.errors import DiscoveryError

logger = logging.getLogger(__name__)


class DockerCloudClient:
    """Lists containers and fetches their detail records."""

    def __init__(
        self,
        base_url: str,
        user: Optional[str] = None,
        apikey: Optional[str] = None,
        auth_header: Optional[str] = None,
        namespace: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: Docker Cloud REST host
            user: Docker Cloud username for basic auth
            apikey: Docker Cloud API key for basic auth
            auth_header: Ready-made Authorization header, wins over user/apikey
            namespace: Organization namespace, if any
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        headers = {"Accept": "application/json"}
        auth = None
        if auth_header:
            headers["Authorization"] = auth_header
        elif user and apikey:
            auth = httpx.BasicAuth(user, apikey)

        self.namespace = namespace
        self.client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            auth=auth,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_config(cls, config: Config, transport: Optional[httpx.AsyncBaseTransport] = None) -> 'DockerCloudClient':
        return cls(
            base_url=config.dockercloud_url,
            user=config.dockercloud_user,
            apikey=config.dockercloud_apikey,
            auth_header=config.dockercloud_auth,
            namespace=config.dockercloud_namespace,
            timeout=config.request_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> 'DockerCloudClient':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self.client.aclose()

    @property
    def container_path(self) -> str:
        if self.namespace:
            return f"/api/app/v1/{self.namespace}/container/"
        return "/api/app/v1/container/"

    async def _get_json(self, url: str, params: Optional[dict] = None) -> dict:
        try:
            response = await self.client.get(url, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise DiscoveryError(
                f"Docker Cloud returned {e.response.status_code} for {url}: {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise DiscoveryError(f"Docker Cloud request to {url} failed: {e}") from e
        except ValueError as e:
            raise DiscoveryError(f"Docker Cloud returned invalid JSON for {url}: {e}") from e

    async def list_containers(self, limit: int) -> List[ContainerSummary]:
        """List container summaries.

        Args:
            limit: Maximum number of containers to return

        Returns:
            Container summaries with their detail resource URIs
        """
        data = await self._get_json(self.container_path, params={"limit": limit})
        try:
            summaries = [ContainerSummary(**obj) for obj in data.get("objects", [])]
        except ValidationError as e:
            raise DiscoveryError(f"Unexpected container listing format: {e}") from e

        logger.debug(f"Listed {len(summaries)} containers (limit={limit})")
        return summaries

    async def get_container(self, resource_uri: str) -> ContainerRecord:
        """Fetch the full record of one container."""
        data = await self._get_json(resource_uri)
        try:
            return ContainerRecord(**data)
        except ValidationError as e:
            raise DiscoveryError(f"Unexpected container format at {resource_uri}: {e}") from e
