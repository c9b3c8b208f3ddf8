"""CLI commands for tenant roles."""

import click

from .context import CliContext
from .pagination import DEFAULT_PAGE_SIZE, get_with_pagination, validate_number
from .utils import CliError, wrap_error


def register_role_commands(cli: click.Group) -> None:
    """Register CLI commands for roles."""

    @cli.group()
    def roles() -> None:
        """Manage roles."""
        pass

    @roles.command(name="list")
    @click.option(
        "--number",
        "-n",
        type=int,
        default=DEFAULT_PAGE_SIZE,
        show_default=True,
        help="Number of roles to retrieve. Minimum 1, maximum 1000.",
    )
    @click.option("--json", "json_output", is_flag=True, help="Output in json format.")
    @click.pass_obj
    def list_roles(obj: CliContext, number: int, json_output: bool) -> None:
        """List the tenant's roles."""
        validate_number(number)
        client = obj.management()
        try:
            all_roles = get_with_pagination(number, client.list_roles)
        except CliError as exc:
            raise wrap_error(exc, "failed to list roles")

        obj.renderer(json_output=json_output).role_list(all_roles)
