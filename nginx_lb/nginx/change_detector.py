"""Detect whether rendered config differs from the active file."""

import logging
from typing import Optional

from ..shared.utils import checksum, file_checksum

logger = logging.getLogger(__name__)


def config_changed(new_config: str, config_file: str) -> bool:
    """Compare checksums of rendered text and the file on disk.

    A missing file counts as changed.
    """
    current: Optional[str] = file_checksum(config_file)
    new = checksum(new_config)

    if current is None:
        logger.debug(f"{config_file} does not exist yet")
        return True

    logger.debug(f"Checksum of {config_file}: {current}, rendered: {new}")
    return current != new
