"""Shared utilities for the nginx load balancer."""

from . import log_levels  # registers TRACE
from .config import Config, get_config
from .errors import (
    NginxLBError,
    DiscoveryError,
    SynthesisError,
    CertificateWriteError,
    CommandError,
)
from .utils import checksum, snake_case

__all__ = [
    'Config',
    'get_config',
    'NginxLBError',
    'DiscoveryError',
    'SynthesisError',
    'CertificateWriteError',
    'CommandError',
    'checksum',
    'snake_case',
]
