"""Command-line interface for the nginx load balancer."""

import asyncio
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .certmanager import CertificateMaterializer
from .main import run
from .orchestrator import PollCycle
from .proxy.models import ProxyModel
from .shared.config import Config
from .shared.errors import NginxLBError
from .shared.python_logger_config import setup_python_logging

console = Console()


def load_config() -> Config:
    """Load .env if present and build validated configuration."""
    env_file = Path(".env")
    if env_file.exists():
        load_dotenv(env_file)

    try:
        config = Config.from_env()
        config.validate()
    except ValueError as e:
        raise click.ClickException(str(e))
    return config


async def _plan(config: Config, write_certs: bool) -> ProxyModel:
    materializer = CertificateMaterializer(config.certs_path, dry_run=not write_certs)
    async with PollCycle(config, materializer=materializer) as cycle:
        materializer.ensure_directory()
        return await cycle.plan()


def print_model(model: ProxyModel) -> None:
    upstreams = Table(title="Upstreams")
    upstreams.add_column("Name", style="cyan")
    upstreams.add_column("Servers")
    for pool in model.upstreams:
        upstreams.add_row(pool.upstream_name, "\n".join(pool.ip_and_port))
    console.print(upstreams)

    servers = Table(title="Servers")
    servers.add_column("Server name", style="cyan")
    servers.add_column("Listener")
    servers.add_column("Location")
    servers.add_column("Action")
    for server in model.plain_servers:
        for location in server.locations:
            servers.add_row(server.server_name, "80", location.location_str, f"proxy {location.upstream_name}")
        for location in server.redirect_locations:
            servers.add_row(server.server_name, "80", location.location_str, "redirect https")
    for server in model.ssl_servers:
        for location in server.locations:
            servers.add_row(server.server_name, "443 ssl", location.location_str, f"proxy {location.upstream_name}")
    console.print(servers)


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
@click.pass_context
def cli(ctx, log_level):
    """Docker Cloud driven nginx load balancer."""
    ctx.obj = load_config()
    setup_python_logging(log_level or ctx.obj.log_level)


@cli.command("run")
@click.option("--once", is_flag=True, help="Run a single poll cycle and exit")
@click.pass_obj
def run_command(config: Config, once: bool):
    """Poll Docker Cloud and keep nginx config in sync."""
    try:
        asyncio.run(run(config, once=once))
    except NginxLBError as e:
        console.print(f"[red]✗ Cycle failed: {e}[/red]")
        sys.exit(1)


@cli.command("plan")
@click.option("--write-certs", is_flag=True, help="Write certificates found in container env")
@click.pass_obj
def plan_command(config: Config, write_certs: bool):
    """Show upstreams and servers without touching nginx."""
    try:
        model = asyncio.run(_plan(config, write_certs))
    except NginxLBError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)
    print_model(model)


@cli.command("render")
@click.pass_obj
def render_command(config: Config):
    """Print the config that the next cycle would apply."""
    async def _render() -> str:
        materializer = CertificateMaterializer(config.certs_path, dry_run=True)
        async with PollCycle(config, materializer=materializer) as cycle:
            return cycle.render(await cycle.plan())

    try:
        click.echo(asyncio.run(_render()))
    except NginxLBError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    cli()
