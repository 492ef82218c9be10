"""Fold balanced containers into upstream pools and server blocks.

Each container contributes one endpoint to the pool named after its
service hostname. Containers that declare virtual hosts also add path
routes to those hosts. A host becomes TLS as soon as any container in
the pass supplies a certificate for it; its plain listener then
redirects to HTTPS instead of proxying.
"""

import logging
from typing import Dict, List, Optional, Sequence

from .models import CertificateWrite, Location, ProxyModel, ServerBlock, UpstreamPool
from ..certmanager.materializer import CertificateMaterializer
from ..docker.models import (
    ContainerEnv,
    ContainerRecord,
    CERTS_KEY,
    DEFAULT_LOCATION,
    DEFAULT_PORT,
    LOCATIONS_KEY,
    PORT_KEY,
    SERVER_NAME_KEY,
    SERVICE_HOSTNAME_KEY,
    VIRTUAL_HOST_KEY,
)
from ..shared.errors import SynthesisError
from ..shared.utils import checksum, snake_case, unescape_newlines

logger = logging.getLogger(__name__)


class _HostEntry:
    """Routes collected for one hostname during a pass."""

    def __init__(self, server_name: str):
        self.server_name = server_name
        self.ssl = False
        self.routes: Dict[str, str] = {}

    def add_route(self, path: str, upstream_name: str) -> None:
        existing = self.routes.get(path)
        if existing is None:
            self.routes[path] = upstream_name
        elif existing != upstream_name:
            logger.warning(
                f"Location {path} on {self.server_name} already routes to {existing}, "
                f"ignoring {upstream_name}"
            )

    def locations(self) -> List[Location]:
        return [
            Location(location_str=path, upstream_name=upstream)
            for path, upstream in self.routes.items()
        ]


class ModelSynthesizer:
    """Builds a ProxyModel from the containers selected for balancing."""

    def __init__(self, materializer: CertificateMaterializer):
        self.materializer = materializer

    def synthesize(self, containers: Sequence[ContainerRecord]) -> ProxyModel:
        """Build the configuration model for one poll cycle.

        Certificates are written as they are encountered, before the model
        is returned.

        Args:
            containers: Running containers balanced by this instance, in
                discovery order

        Returns:
            Model with pools, plain and TLS server blocks, and the
            certificate writes performed

        Raises:
            SynthesisError: A container lacks its service hostname or address
            CertificateWriteError: A certificate could not be written
        """
        upstreams: Dict[str, UpstreamPool] = {}
        hosts: Dict[str, _HostEntry] = {}
        certificates: Dict[str, CertificateWrite] = {}

        for container in containers:
            env = container.env()
            upstream_name = self._upstream_name(env)

            pool = upstreams.get(upstream_name)
            if pool is None:
                pool = UpstreamPool(upstream_name=upstream_name)
                upstreams[upstream_name] = pool
            pool.ip_and_port.append(self._endpoint(container, env))

            for hostname, cert in self._host_pairs(env):
                entry = hosts.get(hostname)
                if entry is None:
                    entry = _HostEntry(hostname)
                    hosts[hostname] = entry

                if cert:
                    self._add_certificate(certificates, hostname, cert)
                    entry.ssl = True

                for path in self._locations(env):
                    entry.add_route(path, upstream_name)

        model = self._build_model(upstreams, hosts, certificates)

        if model.upstreams:
            logger.info(
                f"Upstreams built: {len(model.upstreams)} pools, "
                f"{len(model.plain_servers)} plain servers, {len(model.ssl_servers)} ssl servers"
            )
        else:
            logger.info("There are no upstreams to load balance")

        return model

    def _add_certificate(self, certificates: Dict[str, CertificateWrite], hostname: str, cert: str) -> None:
        # First certificate seen for a host wins; later ones are never written.
        existing = certificates.get(hostname)
        if existing is None:
            certificates[hostname] = self.materializer.write(hostname, cert)
        elif existing.fingerprint != checksum(unescape_newlines(cert)):
            logger.warning(f"Ignoring conflicting certificate for {hostname}, keeping the first one")

    def _upstream_name(self, env: ContainerEnv) -> str:
        service_hostname = env.require(SERVICE_HOSTNAME_KEY)
        upstream_name = snake_case(service_hostname)
        if not upstream_name:
            raise SynthesisError(
                env.container,
                SERVICE_HOSTNAME_KEY,
                f"{SERVICE_HOSTNAME_KEY}={service_hostname!r} does not yield an upstream name",
            )
        return upstream_name

    def _endpoint(self, container: ContainerRecord, env: ContainerEnv) -> str:
        if not container.private_ip:
            raise SynthesisError(container.identifier, "private_ip", "container has no private IP")
        port = env.get(PORT_KEY) or DEFAULT_PORT
        return f"{container.private_ip}:{port}"

    def _host_pairs(self, env: ContainerEnv) -> List[tuple]:
        """(hostname, certificate or None) pairs declared by a container."""
        if VIRTUAL_HOST_KEY in env:
            hostnames = env.get_list(VIRTUAL_HOST_KEY)
        else:
            hostnames = env.get_list(SERVER_NAME_KEY)
        certs = env.get_list(CERTS_KEY)

        if certs and not any(hostnames):
            logger.warning(f"Container {env.container} has {CERTS_KEY} but no virtual host, ignoring certificates")

        pairs = []
        for index, hostname in enumerate(hostnames):
            if not hostname:
                continue
            cert: Optional[str] = certs[index] if index < len(certs) else None
            pairs.append((hostname, cert or None))
        return pairs

    def _locations(self, env: ContainerEnv) -> List[str]:
        return [path for path in env.get_list(LOCATIONS_KEY) if path] or [DEFAULT_LOCATION]

    def _build_model(
        self,
        upstreams: Dict[str, UpstreamPool],
        hosts: Dict[str, _HostEntry],
        certificates: Dict[str, CertificateWrite],
    ) -> ProxyModel:
        plain_servers = []
        ssl_servers = []

        for entry in hosts.values():
            if entry.ssl:
                ssl_servers.append(ServerBlock(
                    server_name=entry.server_name,
                    ssl=True,
                    locations=entry.locations(),
                ))
                plain_servers.append(ServerBlock(
                    server_name=entry.server_name,
                    redirect_locations=entry.locations(),
                ))
            else:
                plain_servers.append(ServerBlock(
                    server_name=entry.server_name,
                    locations=entry.locations(),
                ))

        return ProxyModel(
            upstreams=list(upstreams.values()),
            plain_servers=plain_servers,
            ssl_servers=ssl_servers,
            certificates=list(certificates.values()),
        )
