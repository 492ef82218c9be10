"""Persist certificate material supplied through container environment."""

import logging
import os
from pathlib import Path
from typing import Optional

from ..proxy.models import CertificateWrite
from ..shared.errors import CertificateWriteError
from ..shared.utils import checksum, unescape_newlines

logger = logging.getLogger(__name__)


class CertificateMaterializer:
    """Writes PEM bundles to <certs_path>/<hostname>.crt."""

    def __init__(self, certs_path: str, dry_run: bool = False):
        """Initialize the materializer.

        Args:
            certs_path: Directory certificates are written to
            dry_run: Compute paths and fingerprints without touching disk
        """
        self.certs_path = Path(certs_path)
        self.dry_run = dry_run

    def cert_path(self, hostname: str) -> Path:
        if not hostname or hostname in ('.', '..') or os.sep in hostname or '/' in hostname:
            raise CertificateWriteError(hostname, str(self.certs_path), ValueError("invalid hostname"))
        return self.certs_path / f"{hostname}.crt"

    def ensure_directory(self) -> None:
        """Create the certificate directory if it is missing."""
        if self.dry_run:
            return
        try:
            self.certs_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CertificateWriteError("*", str(self.certs_path), e) from e

    def _current(self, path: Path) -> Optional[str]:
        try:
            return path.read_text()
        except (FileNotFoundError, NotADirectoryError):
            return None
        except OSError as e:
            raise CertificateWriteError(path.stem, str(path), e) from e

    def write(self, hostname: str, cert: str) -> CertificateWrite:
        """Write certificate text for hostname, overwriting prior content.

        Args:
            hostname: Virtual host the certificate belongs to
            cert: PEM text, possibly with escaped newlines

        Returns:
            Record of the write

        Raises:
            CertificateWriteError: If the file cannot be written
        """
        path = self.cert_path(hostname)
        content = unescape_newlines(cert)

        if self.dry_run:
            logger.debug(f"Dry run: would write certificate for {hostname} to {path}")
        elif self._current(path) == content:
            logger.debug(f"Certificate for {hostname} is unchanged")
        else:
            try:
                path.write_text(content)
            except OSError as e:
                raise CertificateWriteError(hostname, str(path), e) from e
            logger.info(f"Wrote certificate for {hostname} to {path}")

        return CertificateWrite(hostname=hostname, path=str(path), fingerprint=checksum(content))
