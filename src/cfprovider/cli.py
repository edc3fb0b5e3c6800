from __future__ import annotations

import json
import logging
from typing import Optional

import click

from . import __version__
from .config import ProviderConfig
from .env_loader import load_env_files
from .exceptions import CloudflareProviderError
from .logging_config import configure_logging
from .provider import configure_provider

_logger = logging.getLogger(__name__)


def _load_config() -> ProviderConfig:
    load_env_files()
    try:
        return ProviderConfig.from_env()
    except CloudflareProviderError as e:
        raise click.ClickException(str(e)) from None


@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
)
@click.version_option(__version__, "--version", prog_name="cfprovider")
@click.option(
    "-v",
    "--verbose",
    "loglevel",
    flag_value=logging.INFO,
    default=None,
    help="Enable INFO logs.",
)
@click.option(
    "-vv",
    "--very-verbose",
    "loglevel",
    flag_value=logging.DEBUG,
    help="Enable DEBUG logs.",
)
@click.pass_context
def cli(ctx: click.Context, loglevel: Optional[int]) -> None:
    """Cloudflare provider CLI. Reads CLOUDFLARE_* settings from the environment or .env."""
    configure_logging(loglevel)
    _logger.debug("CLI start, version=%s", __version__)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command("configure")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
def cmd_configure(as_json: bool) -> None:
    """Bootstrap the API client and report the organization it is bound to."""
    cfg = _load_config()
    try:
        result = configure_provider(cfg)
    except CloudflareProviderError as e:
        raise click.ClickException(str(e)) from None

    ctx = result.org_context
    if as_json:
        click.echo(
            json.dumps(
                {
                    "org_source": ctx.source,
                    "org_id": ctx.org_id,
                    "user_agent": result.client.user_agent,
                },
                indent=2,
            )
        )
    elif ctx.bound:
        click.echo(f"✅  Client configured for organization {ctx.org_id} ({ctx.source})")
    else:
        click.echo("✅  Client configured without an organization (user API)")


@cli.command("show-config")
def cmd_show_config() -> None:
    """Print the resolved configuration with the token masked."""
    cfg = _load_config()
    click.echo(json.dumps(cfg.describe(), indent=2))
