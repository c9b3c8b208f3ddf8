"""CLI command for making raw authenticated requests to the management API."""

from typing import Dict, Optional, Tuple

import click

from .api_request import VALID_METHODS, build_request
from .context import CliContext
from .utils import CliError, wrap_error

API_DOCS_URL = "https://auth0.com/docs/api/management/v2"


def _parse_query_params(
    ctx: click.Context, param: click.Parameter, values: Tuple[str, ...]
) -> Dict[str, str]:
    """Convert repeated ``key=value`` options into a mapping (last value wins)."""
    params: Dict[str, str] = {}
    for value in values:
        key, sep, val = value.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {value!r}", ctx=ctx, param=param)
        params[key] = val
    return params


def register_api_commands(cli: click.Group) -> None:
    """Register the `api` command."""

    @cli.command(
        name="api",
        epilog=(
            f"Management API docs: {API_DOCS_URL}\n\n"
            f"Available methods: {', '.join(VALID_METHODS)}"
        ),
    )
    @click.argument("args", nargs=-1, required=True, metavar="[METHOD] PATH")
    @click.option("--data", "-d", default="", help="JSON data payload to send with the request.")
    @click.option(
        "--query",
        "-q",
        "query_params",
        multiple=True,
        callback=_parse_query_params,
        help="Query param to send with the request (key=value, repeatable).",
    )
    @click.pass_obj
    def api(
        obj: CliContext,
        args: Tuple[str, ...],
        data: str,
        query_params: Optional[Dict[str, str]],
    ) -> None:
        """Make an authenticated HTTP request to the management API.

        Prints the response as JSON. METHOD is optional: without it the request
        uses GET, or POST when --data is given.

        \b
        Examples:
          tcli api "/stats/daily" -q "from=20221101" -q "to=20221118"
          tcli api get "/tenants/settings"
          tcli api clients --data '{"name":"ssoTest","app_type":"sso_integration"}'
        """
        if len(args) > 2:
            raise click.UsageError(f"accepts at most 2 arguments, received {len(args)}")

        try:
            request = build_request(args, obj.domain, data, query_params)
        except CliError as exc:
            raise wrap_error(exc, "failed to parse command inputs")

        response = obj.dispatcher().send(request)
        obj.renderer().json(response.body)
