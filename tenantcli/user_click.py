"""CLI commands for managing a user's role assignments.

`assign` and `remove` prompt for roles when --roles is not given: assign
offers every tenant role the user does not hold yet, remove offers the roles
the user currently holds. After the change the user's roles are fetched again
so the output reflects what the server accepted.
"""

from typing import List, Optional, Tuple

import click

from .context import CliContext
from .management import ManagementClient
from .pagination import DEFAULT_PAGE_SIZE, MAX_ITEMS, get_with_pagination, validate_number
from .reconcile import Entity, parse_ids
from .utils import CliError, wrap_error


def _fetch_user_roles(client: ManagementClient, user_id: str, number: int) -> List[Entity]:
    try:
        return get_with_pagination(number, lambda opts: client.list_user_roles(user_id, opts))
    except CliError as exc:
        raise wrap_error(exc, f"failed to find roles for user with ID {user_id!r}")


def _fetch_all_roles(client: ManagementClient) -> List[Entity]:
    try:
        return get_with_pagination(MAX_ITEMS, client.list_roles)
    except CliError as exc:
        raise wrap_error(exc, "failed to list all roles")


def _resolve_user_id(user_id: Optional[str]) -> str:
    if user_id:
        return user_id
    return click.prompt("User ID", type=str).strip()


def _show_refreshed_roles(
    obj: CliContext, client: ManagementClient, user_id: str, action: str, json_output: bool
) -> None:
    try:
        roles = get_with_pagination(MAX_ITEMS, lambda opts: client.list_user_roles(user_id, opts))
    except CliError as exc:
        raise wrap_error(
            exc, f"roles were {action} user with ID {user_id!r} but failed to refresh roles"
        )
    obj.renderer(json_output=json_output).role_list(
        roles, empty_message=f"No roles assigned to user {user_id}."
    )


def register_user_commands(cli: click.Group) -> None:
    """Register CLI commands for managing users."""

    @cli.group()
    def users() -> None:
        """Manage users."""
        pass

    @users.group()
    def roles() -> None:
        """Manage a user's assigned roles."""
        pass

    @roles.command(name="show")
    @click.argument("user_id", required=False)
    @click.option(
        "--number",
        "-n",
        type=int,
        default=DEFAULT_PAGE_SIZE,
        show_default=True,
        help="Number of user roles to retrieve. Minimum 1, maximum 1000.",
    )
    @click.option("--json", "json_output", is_flag=True, help="Output in json format.")
    @click.pass_obj
    def show_roles(obj: CliContext, user_id: Optional[str], number: int, json_output: bool) -> None:
        """Show a user's roles."""
        validate_number(number)
        user_id = _resolve_user_id(user_id)

        client = obj.management()
        user_roles = _fetch_user_roles(client, user_id, number)
        obj.renderer(json_output=json_output).role_list(
            user_roles, empty_message=f"No roles assigned to user {user_id}."
        )

    @roles.command(name="assign")
    @click.argument("user_id", required=False)
    @click.option(
        "--roles",
        "-r",
        "role_ids",
        multiple=True,
        help="Role IDs to assign (comma-separated or repeated). Prompts when omitted.",
    )
    @click.option("--json", "json_output", is_flag=True, help="Output in json format.")
    @click.pass_obj
    def assign_roles(
        obj: CliContext, user_id: Optional[str], role_ids: Tuple[str, ...], json_output: bool
    ) -> None:
        """Assign roles to a user."""
        user_id = _resolve_user_id(user_id)
        client = obj.management()

        ids = parse_ids(role_ids)
        if not ids:
            current = _fetch_user_roles(client, user_id, MAX_ITEMS)
            universe = _fetch_all_roles(client)
            ids = obj.reconciler("role").pick_to_add(user_id, universe, current)

        try:
            client.assign_user_roles(user_id, ids)
        except CliError as exc:
            raise wrap_error(exc, f"failed to assign roles for user with ID {user_id!r}")

        _show_refreshed_roles(obj, client, user_id, "assigned to", json_output)

    @roles.command(name="remove")
    @click.argument("user_id", required=False)
    @click.option(
        "--roles",
        "-r",
        "role_ids",
        multiple=True,
        help="Role IDs to remove (comma-separated or repeated). Prompts when omitted.",
    )
    @click.option("--json", "json_output", is_flag=True, help="Output in json format.")
    @click.pass_obj
    def remove_roles(
        obj: CliContext, user_id: Optional[str], role_ids: Tuple[str, ...], json_output: bool
    ) -> None:
        """Remove roles from a user."""
        user_id = _resolve_user_id(user_id)
        client = obj.management()

        ids = parse_ids(role_ids)
        if not ids:
            current = _fetch_user_roles(client, user_id, MAX_ITEMS)
            ids = obj.reconciler("role").pick_to_remove(user_id, current)

        try:
            client.remove_user_roles(user_id, ids)
        except CliError as exc:
            raise wrap_error(exc, f"failed to remove roles for user with ID {user_id!r}")

        _show_refreshed_roles(obj, client, user_id, "removed from", json_output)

    # `add` and `rm` aliases
    roles.add_command(assign_roles, name="add")
    roles.add_command(remove_roles, name="rm")
