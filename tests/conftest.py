"""Pytest configuration and shared fixtures."""

import json
from typing import Callable, Dict, List, Optional

import httpx
import pytest

from nginx_lb.certmanager import CertificateMaterializer
from nginx_lb.docker import ContainerRecord, DockerCloudClient
from nginx_lb.shared.config import Config

LB_NAME = "lb-test"

TEST_PEM = "-----BEGIN CERTIFICATE-----\\nMIIBtest\\n-----END CERTIFICATE-----"


def make_container(
    uuid: str,
    env: Dict[str, str],
    private_ip: str = "10.7.0.1",
    state: str = "Running",
    lb_name: Optional[str] = LB_NAME,
) -> ContainerRecord:
    """Build a container record; NGINX_LB is added first unless lb_name is None."""
    envvars = []
    if lb_name is not None:
        envvars.append({"key": "NGINX_LB", "value": lb_name})
    envvars.extend({"key": key, "value": value} for key, value in env.items())
    return ContainerRecord(
        uuid=uuid,
        name=f"container-{uuid}",
        state=state,
        private_ip=private_ip,
        resource_uri=f"/api/app/v1/container/{uuid}/",
        container_envvars=envvars,
    )


def docker_cloud_handler(containers: List[ContainerRecord], fail_uuid: Optional[str] = None) -> Callable:
    """httpx MockTransport handler serving a fake Docker Cloud container API."""
    by_uri = {c.resource_uri: c for c in containers}

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/api/app/v1/container/":
            limit = int(request.url.params.get("limit", "25"))
            objects = [
                {"uuid": c.uuid, "name": c.name, "state": c.state, "resource_uri": c.resource_uri}
                for c in containers[:limit]
            ]
            return httpx.Response(200, json={"meta": {"total_count": len(objects)}, "objects": objects})

        container = by_uri.get(path)
        if container is None:
            return httpx.Response(404, json={"error": "not found"})
        if fail_uuid and container.uuid == fail_uuid:
            return httpx.Response(500, text="internal error")
        return httpx.Response(200, content=json.dumps(container.model_dump()).encode())

    return handler


@pytest.fixture
def lb_name() -> str:
    return LB_NAME


@pytest.fixture
def certs_dir(tmp_path):
    path = tmp_path / "certs"
    path.mkdir()
    return path


@pytest.fixture
def config_file(tmp_path):
    return tmp_path / "default.conf"


@pytest.fixture
def config(tmp_path, certs_dir, config_file) -> Config:
    """Configuration pointing at temporary paths with harmless commands."""
    return Config(
        lb_name=LB_NAME,
        config_file=str(config_file),
        certs_path=str(certs_dir),
        test_command="true",
        reload_command=f"touch {tmp_path / 'reloaded'}",
        dockercloud_url="https://cloud.docker.test",
    )


@pytest.fixture
def materializer(certs_dir) -> CertificateMaterializer:
    return CertificateMaterializer(str(certs_dir))


@pytest.fixture
def cloud_client_factory():
    """Create DockerCloudClients backed by a fake API."""
    def factory(containers: List[ContainerRecord], fail_uuid: Optional[str] = None, **kwargs) -> DockerCloudClient:
        transport = httpx.MockTransport(docker_cloud_handler(containers, fail_uuid))
        return DockerCloudClient("https://cloud.docker.test", transport=transport, **kwargs)
    return factory
