"""Shell commands that validate and reload nginx."""

import asyncio
import logging

from ..shared.config import Config
from ..shared.errors import CommandError

logger = logging.getLogger(__name__)


class NginxCommands:
    """Runs the config test and reload commands."""

    def __init__(self, test_command: str = "nginx -t", reload_command: str = "service nginx reload", enabled: bool = True):
        self.test_command = test_command
        self.reload_command = reload_command
        self.enabled = enabled

    @classmethod
    def from_config(cls, config: Config) -> 'NginxCommands':
        return cls(
            test_command=config.test_command,
            reload_command=config.reload_command,
            enabled=config.reload_enabled,
        )

    async def validate(self) -> str:
        """Check the written config. Returns captured output."""
        return await self._run(self.test_command)

    async def reload(self) -> str:
        """Reload nginx. Returns captured output."""
        return await self._run(self.reload_command)

    async def _run(self, command: str) -> str:
        if not self.enabled or not command:
            logger.debug(f"Skipping '{command}' (reload disabled)")
            return ""

        logger.debug(f"Running '{command}'")
        try:
            process = await asyncio.create_subprocess_shell(
                command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
            stdout, _ = await process.communicate()
        except OSError as e:
            raise CommandError(command, None, str(e)) from e
        output = stdout.decode(errors='replace').strip() if stdout else ""

        if process.returncode != 0:
            raise CommandError(command, process.returncode, output)

        return output
