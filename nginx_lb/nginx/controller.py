"""Write, validate and reload nginx configuration.

One apply runs per poll cycle:

    changed? --no--> UNCHANGED
       |
     write -> validate -> reload -> APPLIED
                 |          |
                 +----------+-----> FAILED (notify)

A failed validate or reload leaves the written file in place; nginx keeps
serving the previously loaded configuration until the next cycle writes a
good one.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from .change_detector import config_changed
from .commands import NginxCommands
from ..alerts.notifier import SlackNotifier
from ..proxy.renderer import splice_upstreams
from ..shared.errors import CommandError

logger = logging.getLogger(__name__)


class ApplyState(str, Enum):
    """Terminal states of an apply run."""
    UNCHANGED = "unchanged"
    APPLIED = "applied"
    FAILED = "failed"


class ApplyResult(BaseModel):
    """Outcome of applying rendered configuration."""
    state: ApplyState
    config: str
    error: Optional[str] = None


class ConfigApplier:
    """Applies rendered config to the active nginx config file."""

    def __init__(
        self,
        config_file: str,
        commands: NginxCommands,
        notifier: SlackNotifier,
        mode: str = "full",
    ):
        """Initialize the applier.

        Args:
            config_file: Active nginx config path
            commands: Validate and reload commands
            notifier: Failure notifier
            mode: "full" to replace the whole file, "upstreams" to splice
                the rendered text between the #upstreams markers
        """
        self.config_file = Path(config_file)
        self.commands = commands
        self.notifier = notifier
        self.mode = mode

    def build_config(self, rendered: str) -> str:
        """File content that results from applying rendered text.

        Raises:
            FileNotFoundError: Splicing into a missing file
            ValueError: Splicing into a file without markers
        """
        if self.mode != "upstreams":
            return rendered
        existing = self.config_file.read_text()
        return splice_upstreams(existing, rendered)

    async def apply(self, rendered: str) -> ApplyResult:
        """Apply rendered config if it differs from the active file.

        Args:
            rendered: Full config text, or the upstreams region in
                "upstreams" mode

        Returns:
            Result in state UNCHANGED, APPLIED or FAILED
        """
        try:
            new_config = self.build_config(rendered)
        except (OSError, ValueError) as e:
            return await self._failed(rendered, f"Cannot update {self.config_file}: {e}")

        try:
            changed = config_changed(new_config, str(self.config_file))
        except OSError as e:
            return await self._failed(new_config, f"Cannot read {self.config_file}: {e}")

        if not changed:
            logger.info("Nginx config was unchanged")
            return ApplyResult(state=ApplyState.UNCHANGED, config=new_config)

        try:
            self.config_file.write_text(new_config)
        except OSError as e:
            return await self._failed(new_config, f"Cannot write {self.config_file}: {e}")
        logger.info(f"Wrote new config to {self.config_file}")

        try:
            logger.info("Testing new Nginx config...")
            await self.commands.validate()
            await self.commands.reload()
        except CommandError as e:
            return await self._failed(new_config, e.output or str(e))

        logger.info("Nginx reload successful")
        logger.info(new_config)
        return ApplyResult(state=ApplyState.APPLIED, config=new_config)

    async def _failed(self, config: str, error: str) -> ApplyResult:
        logger.error(f"Config failed: {error}")
        logger.error(config)
        await self.notifier.config_failed(config, error)
        return ApplyResult(state=ApplyState.FAILED, config=config, error=error)
