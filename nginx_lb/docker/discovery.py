"""Container discovery and selection."""

import asyncio
import logging
from typing import List, Sequence

from .cloud_client import DockerCloudClient
from .models import ContainerRecord, ContainerSummary, LB_KEY

logger = logging.getLogger(__name__)


async def fetch_full_container_detail(
    client: DockerCloudClient,
    summaries: Sequence[ContainerSummary],
) -> List[ContainerRecord]:
    """Fetch every container's detail record concurrently.

    Results keep the order of summaries. The first failing lookup fails
    the whole fetch and cancels the lookups still in flight.
    """
    tasks = [asyncio.ensure_future(client.get_container(summary.resource_uri)) for summary in summaries]
    try:
        return list(await asyncio.gather(*tasks))
    except Exception:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


def get_containers_to_balance(
    containers: Sequence[ContainerRecord],
    lb_name: str,
) -> List[ContainerRecord]:
    """Select running containers whose NGINX_LB entry names this load balancer."""
    return [
        container for container in containers
        if any(env.key == LB_KEY and env.value == lb_name for env in container.container_envvars)
        and container.is_running
    ]


async def discover_containers(client: DockerCloudClient, lb_name: str, limit: int) -> List[ContainerRecord]:
    """List, fetch and filter the containers balanced by lb_name."""
    summaries = await client.list_containers(limit)
    records = await fetch_full_container_detail(client, summaries)
    selected = get_containers_to_balance(records, lb_name)

    logger.info(f"Discovered {len(records)} containers, {len(selected)} to balance for {lb_name}")
    for container in selected:
        logger.trace(f"Balancing {container.identifier} at {container.private_ip}")

    return selected
