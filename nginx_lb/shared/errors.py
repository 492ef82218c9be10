"""Exception hierarchy for a poll cycle."""

from typing import Optional


class NginxLBError(Exception):
    """Base class for errors that abort or fail a poll cycle."""


class DiscoveryError(NginxLBError):
    """Container inventory or detail lookup failed."""


class SynthesisError(NginxLBError):
    """A container is missing configuration needed to build the model."""

    def __init__(self, container: str, key: str, reason: Optional[str] = None):
        self.container = container
        self.key = key
        super().__init__(f"Container {container}: {reason or f'missing required env var {key}'}")


class CertificateWriteError(NginxLBError):
    """A certificate could not be written to disk."""

    def __init__(self, hostname: str, path: str, error: Exception):
        self.hostname = hostname
        self.path = path
        super().__init__(f"Failed to write certificate for {hostname} to {path}: {error}")


class CommandError(NginxLBError):
    """An nginx control command exited with a non-zero status."""

    def __init__(self, command: str, returncode: Optional[int], output: str):
        self.command = command
        self.returncode = returncode
        self.output = output
        super().__init__(f"Command '{command}' failed with exit code {returncode}: {output}")
