"""Main entry point for the nginx load balancer."""

import asyncio
import logging
import signal
import sys

from .orchestrator import PollCycle
from .shared.config import Config, get_config
from .shared.python_logger_config import setup_python_logging

logger = logging.getLogger(__name__)


async def run(config: Config, once: bool = False) -> None:
    """Run one cycle or poll until interrupted."""
    async with PollCycle(config) as cycle:
        if once:
            await cycle.run_once()
            return

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, cycle.stop)
            except NotImplementedError:
                pass

        await cycle.run_forever()


def main() -> None:
    """Main entry point for `python run.py` or `python -m nginx_lb.main`."""
    try:
        config = get_config()
        setup_python_logging(config.log_level)

        logger.info("=" * 60)
        logger.info(f"NGINX LOAD BALANCER {config.lb_name} STARTING")
        logger.info("=" * 60)
        logger.info(f"Configuration loaded: {config!r}")

        asyncio.run(run(config))

    except KeyboardInterrupt:
        logger.info("Shutting down (interrupted)")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Failed to start nginx load balancer: {e}")
        print(f"ERROR: Failed to start nginx load balancer: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
