"""Certificate materialization component."""

from .materializer import CertificateMaterializer

__all__ = ['CertificateMaterializer']
