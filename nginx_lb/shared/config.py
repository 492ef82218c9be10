"""Centralized configuration management for the nginx load balancer."""

import os
from typing import Mapping, Optional
from functools import lru_cache


CONFIG_MODES = ("full", "upstreams")


class Config:
    """Configuration built once from environment variables.

    The instance is passed explicitly to every component instead of being
    read from the environment at the point of use.
    """

    def __init__(
        self,
        lb_name: str,
        slack_webhook: Optional[str] = None,
        config_file: str = "/etc/nginx/conf.d/default.conf",
        certs_path: str = "/certs",
        container_limit: int = 25,
        reload_enabled: bool = True,
        config_mode: str = "full",
        test_command: str = "nginx -t",
        reload_command: str = "service nginx reload",
        poll_interval: float = 30.0,
        dockercloud_url: str = "https://cloud.docker.com",
        dockercloud_user: Optional[str] = None,
        dockercloud_apikey: Optional[str] = None,
        dockercloud_auth: Optional[str] = None,
        dockercloud_namespace: Optional[str] = None,
        request_timeout: float = 30.0,
        log_level: str = "INFO",
    ):
        # Load balancer identity
        self.lb_name = lb_name
        self.slack_webhook = slack_webhook

        # Filesystem
        self.config_file = config_file
        self.certs_path = certs_path

        # Discovery
        self.container_limit = container_limit
        self.poll_interval = poll_interval
        self.dockercloud_url = dockercloud_url.rstrip('/')
        self.dockercloud_user = dockercloud_user
        self.dockercloud_apikey = dockercloud_apikey
        self.dockercloud_auth = dockercloud_auth
        self.dockercloud_namespace = dockercloud_namespace
        self.request_timeout = request_timeout

        # Nginx process control
        self.reload_enabled = reload_enabled
        self.config_mode = config_mode
        self.test_command = test_command
        self.reload_command = reload_command

        # Logging
        self.log_level = log_level.upper()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Config':
        """Build configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            Unvalidated configuration instance
        """
        env = os.environ if environ is None else environ
        return cls(
            lb_name=env.get('NGINX_LB_NAME', ''),
            slack_webhook=env.get('SLACK_WEBHOOK') or None,
            config_file=env.get('NGINX_CONFIG_FILE', '/etc/nginx/conf.d/default.conf'),
            certs_path=env.get('NGINX_CERTS', '/certs'),
            container_limit=int(env.get('CONTAINER_LIMIT', '25')),
            reload_enabled=env.get('NGINX_RELOAD', 'true').lower() != 'false',
            config_mode=env.get('NGINX_CONFIG_MODE', 'full').lower(),
            test_command=env.get('NGINX_TEST_CMD', 'nginx -t'),
            reload_command=env.get('NGINX_RELOAD_CMD', 'service nginx reload'),
            poll_interval=float(env.get('POLL_INTERVAL', '30')),
            dockercloud_url=env.get('DOCKERCLOUD_REST_HOST', 'https://cloud.docker.com'),
            dockercloud_user=env.get('DOCKERCLOUD_USER'),
            dockercloud_apikey=env.get('DOCKERCLOUD_APIKEY'),
            dockercloud_auth=env.get('DOCKERCLOUD_AUTH'),
            dockercloud_namespace=env.get('DOCKERCLOUD_NAMESPACE') or None,
            request_timeout=float(env.get('DOCKERCLOUD_TIMEOUT', '30')),
            log_level=env.get('LOG_LEVEL', 'INFO'),
        )

    def validate(self) -> None:
        """Validate configuration values."""
        errors = []

        if not self.lb_name:
            errors.append("NGINX_LB_NAME is required")

        if self.container_limit < 1:
            errors.append(f"CONTAINER_LIMIT must be at least 1, got {self.container_limit}")

        if self.poll_interval <= 0:
            errors.append(f"POLL_INTERVAL must be positive, got {self.poll_interval}")

        if self.config_mode not in CONFIG_MODES:
            errors.append(
                f"NGINX_CONFIG_MODE must be one of: {', '.join(CONFIG_MODES)}, got {self.config_mode}"
            )

        if errors:
            raise ValueError(f"Configuration errors: {'; '.join(errors)}")

    def __repr__(self) -> str:
        return (
            f"Config(lb_name={self.lb_name!r}, config_file={self.config_file!r}, "
            f"certs_path={self.certs_path!r}, mode={self.config_mode!r}, "
            f"reload_enabled={self.reload_enabled})"
        )


@lru_cache()
def get_config() -> Config:
    """Get validated configuration instance."""
    config = Config.from_env()
    config.validate()
    return config
