"""Docker Cloud container models and data structures."""

from typing import Dict, List, Optional
from enum import Enum
from pydantic import BaseModel, Field, field_validator

from ..shared.errors import SynthesisError
from ..shared.utils import split_csv


# Environment variables read from each container
LB_KEY = "NGINX_LB"
SERVICE_HOSTNAME_KEY = "DOCKERCLOUD_SERVICE_HOSTNAME"
PORT_KEY = "NGINX_PORT"
VIRTUAL_HOST_KEY = "NGINX_VIRTUAL_HOST"
CERTS_KEY = "NGINX_CERTS"
LOCATIONS_KEY = "NGINX_LOCATIONS"
SERVER_NAME_KEY = "NGINX_SERVER_NAME"

DEFAULT_PORT = "80"
DEFAULT_LOCATION = "/"


class ContainerState(str, Enum):
    """Container states reported by Docker Cloud."""
    INIT = "Init"
    STARTING = "Starting"
    RUNNING = "Running"
    STOPPING = "Stopping"
    STOPPED = "Stopped"
    TERMINATING = "Terminating"
    TERMINATED = "Terminated"


class ContainerEnvVar(BaseModel):
    """A single key/value environment entry of a container."""
    key: str
    value: str = ""

    @field_validator('value', mode='before')
    @classmethod
    def validate_value(cls, v: Optional[str]) -> str:
        return "" if v is None else str(v)


class ContainerSummary(BaseModel):
    """Container as returned by the inventory listing."""
    uuid: Optional[str] = None
    name: Optional[str] = None
    state: Optional[str] = None
    resource_uri: str


class ContainerRecord(BaseModel):
    """Full container detail record."""
    uuid: str
    name: Optional[str] = None
    state: str
    private_ip: Optional[str] = None
    resource_uri: Optional[str] = None
    container_envvars: List[ContainerEnvVar] = Field(default_factory=list)

    @property
    def identifier(self) -> str:
        return self.name or self.uuid

    @property
    def is_running(self) -> bool:
        return self.state == ContainerState.RUNNING.value

    def env(self) -> 'ContainerEnv':
        """Build the lookup table for this container's environment."""
        return ContainerEnv(self.identifier, self.container_envvars)


class ContainerEnv:
    """First-match-wins lookup over a container's environment entries."""

    def __init__(self, container: str, envvars: List[ContainerEnvVar]):
        self.container = container
        self._values: Dict[str, str] = {}
        for env in envvars:
            self._values.setdefault(env.key, env.value)

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._values.get(key, default)

    def require(self, key: str) -> str:
        """Value for key, raising SynthesisError when absent."""
        if key not in self._values:
            raise SynthesisError(self.container, key)
        return self._values[key]

    def get_list(self, key: str) -> List[str]:
        """Comma separated value as a trimmed list (empty when absent)."""
        return split_csv(self._values.get(key))
