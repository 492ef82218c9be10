"""Tests for environment configuration."""

import click
import pytest

from nginx_lb.cli import load_config
from nginx_lb.shared.config import Config


class TestConfig:
    """Test building configuration from environment variables."""

    def test_defaults(self):
        config = Config.from_env({"NGINX_LB_NAME": "lb1"})
        config.validate()

        assert config.lb_name == "lb1"
        assert config.slack_webhook is None
        assert config.config_file == "/etc/nginx/conf.d/default.conf"
        assert config.certs_path == "/certs"
        assert config.container_limit == 25
        assert config.reload_enabled is True
        assert config.config_mode == "full"
        assert config.test_command == "nginx -t"
        assert config.reload_command == "service nginx reload"

    def test_overrides(self):
        config = Config.from_env({
            "NGINX_LB_NAME": "lb1",
            "SLACK_WEBHOOK": "https://hooks.slack.test/T000",
            "NGINX_CONFIG_FILE": "/tmp/nginx.conf",
            "NGINX_CERTS": "/tmp/certs",
            "CONTAINER_LIMIT": "100",
            "NGINX_RELOAD": "false",
            "NGINX_CONFIG_MODE": "upstreams",
            "DOCKERCLOUD_REST_HOST": "https://cloud.docker.test/",
        })
        config.validate()

        assert config.slack_webhook == "https://hooks.slack.test/T000"
        assert config.config_file == "/tmp/nginx.conf"
        assert config.certs_path == "/tmp/certs"
        assert config.container_limit == 100
        assert config.reload_enabled is False
        assert config.config_mode == "upstreams"
        assert config.dockercloud_url == "https://cloud.docker.test"

    def test_reload_flag_only_disabled_by_false(self):
        assert Config.from_env({"NGINX_LB_NAME": "lb1", "NGINX_RELOAD": "no"}).reload_enabled is True
        assert Config.from_env({"NGINX_LB_NAME": "lb1", "NGINX_RELOAD": "FALSE"}).reload_enabled is False

    def test_missing_lb_name_is_invalid(self):
        with pytest.raises(ValueError) as exc_info:
            Config.from_env({}).validate()
        assert "NGINX_LB_NAME" in str(exc_info.value)

    def test_collects_all_errors(self):
        config = Config.from_env({
            "CONTAINER_LIMIT": "0",
            "NGINX_CONFIG_MODE": "partial",
        })

        with pytest.raises(ValueError) as exc_info:
            config.validate()

        message = str(exc_info.value)
        assert "NGINX_LB_NAME" in message
        assert "CONTAINER_LIMIT" in message
        assert "NGINX_CONFIG_MODE" in message

    @pytest.mark.parametrize("key", ["CONTAINER_LIMIT", "POLL_INTERVAL"])
    def test_cli_reports_non_numeric_values(self, monkeypatch, tmp_path, key):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("NGINX_LB_NAME", "lb1")
        monkeypatch.setenv(key, "often")

        with pytest.raises(click.ClickException):
            load_config()
