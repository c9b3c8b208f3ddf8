"""CLI commands for tenant logs."""

from typing import Optional

import click

from .context import CliContext
from .pagination import DEFAULT_PAGE_SIZE, get_with_pagination, validate_number
from .utils import CliError, wrap_error


def register_log_commands(cli: click.Group) -> None:
    """Register CLI commands for logs."""

    @cli.group()
    def logs() -> None:
        """View tenant logs."""
        pass

    @logs.command(name="list")
    @click.option(
        "--number",
        "-n",
        type=int,
        default=DEFAULT_PAGE_SIZE,
        show_default=True,
        help="Number of log entries to retrieve. Minimum 1, maximum 1000.",
    )
    @click.option("--filter", "-f", "query", help="Filter in Lucene query syntax.")
    @click.pass_obj
    def list_logs(obj: CliContext, number: int, query: Optional[str]) -> None:
        """Show the most recent log entries, one per line."""
        validate_number(number)
        client = obj.management()
        try:
            entries = get_with_pagination(number, lambda opts: client.list_logs(opts, query))
        except CliError as exc:
            raise wrap_error(exc, "failed to list logs")

        obj.renderer().log_list(entries)
