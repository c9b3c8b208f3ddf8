"""CLI commands for managing configured tenants."""

import json

import click

from .profiles import TenantConfig
from .utils import format_success


def register_tenant_commands(cli: click.Group) -> None:
    """Register CLI commands for tenants."""

    @cli.group()
    def tenants() -> None:
        """Manage configured tenants."""
        pass

    @tenants.command(name="list")
    @click.option("--json", "json_output", is_flag=True, help="Output in json format.")
    def list_tenants(json_output: bool) -> None:
        """List configured tenants."""
        config = TenantConfig.load()
        tenant_list = config.list_tenants()

        if json_output:
            click.echo(json.dumps([t.to_dict() for t in tenant_list], indent=2))
            return
        if not tenant_list:
            click.echo("No tenants configured. Run 'tcli login' to add one.")
            return

        for tenant in tenant_list:
            marker = "*" if tenant.domain == config.default_tenant else " "
            label = f" ({tenant.name})" if tenant.name else ""
            click.echo(f"{marker} {tenant.domain}{label}")

    @tenants.command(name="use")
    @click.argument("domain")
    def use_tenant(domain: str) -> None:
        """Set the default tenant."""
        config = TenantConfig.load()
        config.set_default_tenant(domain)
        config.save()
        format_success(f"Default tenant set to {domain}")
