"""Proxy configuration models rendered into nginx config."""

from typing import List, Set
from pydantic import BaseModel, Field


class UpstreamPool(BaseModel):
    """Named group of backend endpoints."""
    upstream_name: str
    ip_and_port: List[str] = Field(default_factory=list)


class Location(BaseModel):
    """Path routing entry of a server block."""
    location_str: str = "/"
    upstream_name: str


class ServerBlock(BaseModel):
    """A virtual host server block on one listener."""
    server_name: str
    ssl: bool = False
    locations: List[Location] = Field(default_factory=list)
    redirect_locations: List[Location] = Field(default_factory=list)

    def upstream_names(self) -> Set[str]:
        return {loc.upstream_name for loc in self.locations + self.redirect_locations}


class CertificateWrite(BaseModel):
    """Record of a certificate materialized during synthesis."""
    hostname: str
    path: str
    fingerprint: str


class ProxyModel(BaseModel):
    """Render-ready configuration for one poll cycle."""
    upstreams: List[UpstreamPool] = Field(default_factory=list)
    plain_servers: List[ServerBlock] = Field(default_factory=list)
    ssl_servers: List[ServerBlock] = Field(default_factory=list)
    certificates: List[CertificateWrite] = Field(default_factory=list)

    def upstream_names(self) -> Set[str]:
        return {pool.upstream_name for pool in self.upstreams}

    def dangling_references(self) -> Set[str]:
        """Upstream names referenced by a server block but not defined."""
        referenced = set()
        for server in self.plain_servers + self.ssl_servers:
            referenced |= server.upstream_names()
        return referenced - self.upstream_names()
