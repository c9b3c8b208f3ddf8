"""tcli entry points."""

import getpass
import os
from pathlib import Path
from typing import Optional

import click
import tomllib

from .api_click import register_api_commands
from .api_request import resolve_url
from .context import CliContext
from .log_click import register_log_commands
from .profiles import Tenant, TenantConfig, delete_access_token, store_access_token
from .role_click import register_role_commands
from .ssl_trust import OS_TRUST_INJECTED, OS_TRUST_REASON
from .tenant_click import register_tenant_commands
from .user_click import register_user_commands
from .utils import format_success


def get_version() -> str:
    """Get version from _version.py or pyproject.toml (development checkout)."""
    try:
        from ._version import __version__

        return __version__
    except ImportError:
        try:
            pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
            with open(pyproject_path, "rb") as f:
                pyproject_data = tomllib.load(f)
            return pyproject_data["project"]["version"]
        except (OSError, KeyError, tomllib.TOMLDecodeError):
            return "unknown"


CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


@click.group(context_settings=CONTEXT_SETTINGS, invoke_without_command=True)
@click.option("--version", "-v", is_flag=True, help="Show version and exit")
@click.option("--tenant", help="Tenant domain to use for this command.")
@click.option("--no-color", is_flag=True, help="Disable colored output.")
@click.option("--debug", is_flag=True, help="Print request lines and status codes to stderr.")
@click.pass_context
def cli(
    ctx: click.Context, version: bool, tenant: Optional[str], no_color: bool, debug: bool
) -> None:
    """tcli - command-line client for the tenant management API."""
    if version:
        click.echo(f"tcli version {get_version()}")
        ctx.exit()

    if ctx.obj is None:
        ctx.obj = CliContext(tenant=tenant, no_color=no_color, debug=debug)
    else:
        if tenant:
            ctx.obj.tenant = tenant
        ctx.obj.no_color = ctx.obj.no_color or no_color
        ctx.obj.debug = ctx.obj.debug or debug

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command(hidden=True, name="_ca-info")
def ca_info() -> None:
    """Show TLS CA trust source (hidden diagnostic)."""
    if OS_TRUST_INJECTED:
        click.echo(f"CA Source: system (reason={OS_TRUST_REASON})")
        return
    verify_env = os.environ.get("REQUESTS_CA_BUNDLE") or os.environ.get("SSL_CERT_FILE")
    if verify_env:
        click.echo(f"CA Source: custom-pem ({verify_env})")
    else:
        click.echo(f"CA Source: certifi (reason={OS_TRUST_REASON})")


@cli.command()
@click.option("--domain", help="Tenant domain, e.g. acme.eu.example.com")
@click.option("--token", help="Management API access token")
@click.option("--name", help="Friendly name for the tenant")
def login(domain: Optional[str], token: Optional[str], name: Optional[str]) -> None:
    """Store a tenant domain and its access token.

    The token is saved in the system keyring under service 'tenant-cli',
    keyed by domain. The tenant becomes the default tenant.
    """
    if not domain:
        domain = click.prompt("Enter your tenant domain")
    assert isinstance(domain, str)
    domain = domain.strip()
    for prefix in ("https://", "http://"):
        if domain.startswith(prefix):
            click.echo("⚠️  Warning: Removing protocol from tenant domain.")
            domain = domain[len(prefix) :]
    domain = domain.rstrip("/")
    # raises InvalidInputError for anything that is not a hostname
    resolve_url(domain, "")

    if not token:
        token = getpass.getpass("Enter your access token: ")
    assert isinstance(token, str)
    if not token.strip():
        raise click.ClickException("Access token cannot be empty.")

    store_access_token(domain, token.strip())

    config = TenantConfig.load()
    config.add_tenant(Tenant(domain=domain, name=name), set_default=True)
    config.save()
    format_success(f"Logged in to {domain}")


@cli.command()
@click.option("--tenant", "domain", help="Tenant to log out of (default: the default tenant)")
def logout(domain: Optional[str]) -> None:
    """Remove a tenant and its stored access token."""
    config = TenantConfig.load()
    domain = domain or config.default_tenant
    if not domain:
        raise click.ClickException("No tenant configured.")

    delete_access_token(domain)
    config.remove_tenant(domain)
    config.save()
    format_success(f"Logged out of {domain}")


register_api_commands(cli)
register_log_commands(cli)
register_role_commands(cli)
register_tenant_commands(cli)
register_user_commands(cli)
