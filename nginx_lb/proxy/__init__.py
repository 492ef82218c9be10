"""Proxy configuration model, synthesis and rendering."""

from .models import CertificateWrite, Location, ProxyModel, ServerBlock, UpstreamPool

__all__ = ['CertificateWrite', 'Location', 'ProxyModel', 'ServerBlock', 'UpstreamPool']
