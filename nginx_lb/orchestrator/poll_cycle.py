"""Poll cycle orchestration: discover, synthesize, render, apply."""

import asyncio
import logging
from typing import List, Optional

from pydantic import BaseModel

from ..alerts.notifier import SlackNotifier
from ..certmanager.materializer import CertificateMaterializer
from ..docker.cloud_client import DockerCloudClient
from ..docker.discovery import discover_containers
from ..docker.models import ContainerRecord
from ..nginx.commands import NginxCommands
from ..nginx.controller import ApplyResult, ApplyState, ConfigApplier
from ..proxy.models import ProxyModel
from ..proxy.renderer import render_config, render_upstreams
from ..proxy.synthesizer import ModelSynthesizer
from ..shared.config import Config
from ..shared.errors import NginxLBError

logger = logging.getLogger(__name__)


class CycleResult(BaseModel):
    """Outcome of one poll cycle."""
    state: ApplyState
    container_count: int
    model: ProxyModel
    apply: ApplyResult


class PollCycle:
    """Runs poll cycles for one load balancer instance."""

    def __init__(
        self,
        config: Config,
        client: Optional[DockerCloudClient] = None,
        commands: Optional[NginxCommands] = None,
        notifier: Optional[SlackNotifier] = None,
        materializer: Optional[CertificateMaterializer] = None,
    ):
        self.config = config
        self.client = client or DockerCloudClient.from_config(config)
        self.materializer = materializer or CertificateMaterializer(config.certs_path)
        self.synthesizer = ModelSynthesizer(self.materializer)
        self.notifier = notifier or SlackNotifier(config.lb_name, config.slack_webhook)
        self.applier = ConfigApplier(
            config.config_file,
            commands or NginxCommands.from_config(config),
            self.notifier,
            mode=config.config_mode,
        )

        self.running = False
        self.shutdown_event = asyncio.Event()

    async def __aenter__(self) -> 'PollCycle':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self.client.close()

    async def discover(self) -> List[ContainerRecord]:
        return await discover_containers(self.client, self.config.lb_name, self.config.container_limit)

    async def plan(self) -> ProxyModel:
        """Discover containers and build the model without applying it."""
        containers = await self.discover()
        return self.synthesizer.synthesize(containers)

    def render(self, model: ProxyModel) -> str:
        if self.config.config_mode == "upstreams":
            return render_upstreams(model)
        return render_config(model, self.config.certs_path)

    async def run_once(self) -> CycleResult:
        """Run one full cycle.

        Raises:
            DiscoveryError: Inventory or detail lookup failed
            SynthesisError: A balanced container is misconfigured
            CertificateWriteError: A certificate could not be written
        """
        containers = await self.discover()
        self.materializer.ensure_directory()
        model = self.synthesizer.synthesize(containers)
        rendered = self.render(model)
        logger.trace(f"Rendered config:\n{rendered}")

        result = await self.applier.apply(rendered)
        logger.info(f"Cycle finished: {result.state.value}")

        return CycleResult(
            state=result.state,
            container_count=len(containers),
            model=model,
            apply=result,
        )

    async def run_forever(self) -> None:
        """Run cycles every poll_interval seconds until stopped.

        Errors abort the current cycle only; the next cycle is the retry.
        """
        self.running = True
        logger.info(f"Polling every {self.config.poll_interval}s for {self.config.lb_name}")

        while self.running:
            try:
                await self.run_once()
            except NginxLBError as e:
                logger.error(f"Cycle aborted: {e}")

            try:
                await asyncio.wait_for(self.shutdown_event.wait(), timeout=self.config.poll_interval)
            except asyncio.TimeoutError:
                continue

        logger.info("Poll loop stopped")

    def stop(self) -> None:
        self.running = False
        self.shutdown_event.set()
