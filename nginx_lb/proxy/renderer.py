"""Render a ProxyModel into nginx configuration text."""

import re
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .models import ProxyModel

TEMPLATE_DIR = Path(__file__).parent / "templates"

UPSTREAMS_START = "#upstreams"
UPSTREAMS_END = "#upstreams-end"
UPSTREAMS_REGION = re.compile(r"#upstreams[\s\S]+#upstreams-end", re.MULTILINE)

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=False,
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)


def render_config(model: ProxyModel, certs_path: str) -> str:
    """Render the complete nginx config file body."""
    template = _env.get_template("nginx.conf.j2")
    return template.render(
        certs_path=certs_path.rstrip('/'),
        upstreams=model.upstreams,
        plain_servers=model.plain_servers,
        ssl_servers=model.ssl_servers,
    )


def render_upstreams(model: ProxyModel) -> str:
    """Render only the #upstreams ... #upstreams-end region."""
    template = _env.get_template("upstreams.conf.j2")
    return template.render(upstreams=model.upstreams).rstrip('\n')


def splice_upstreams(existing: str, upstreams: str) -> str:
    """Replace the marked upstream region of an existing config.

    Raises:
        ValueError: If the existing config has no marked region
    """
    if not UPSTREAMS_REGION.search(existing):
        raise ValueError(f"Config has no '{UPSTREAMS_START}' ... '{UPSTREAMS_END}' region")
    return UPSTREAMS_REGION.sub(lambda _: upstreams, existing, count=1)
