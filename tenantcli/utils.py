"""Shared utility functions for tenant-cli."""

import json
import os
from typing import IO, Any, Optional

import click


class ExitCodes:
    """Standard exit codes for CLI operations."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    INVALID_INPUT = 2
    NOT_FOUND = 3
    PERMISSION_DENIED = 4
    NETWORK_ERROR = 5
    USER_ABORT = 6
    RENDER_ERROR = 7


class CliError(click.ClickException):
    """Base error for tenant-cli failures.

    Rendered by click as a single ``✗ <message>`` line on stderr, followed by a
    process exit with ``exit_code``.
    """

    exit_code = ExitCodes.GENERAL_ERROR

    def __init__(self, message: str, exit_code: Optional[int] = None) -> None:
        """Initialize the error with a message and optional exit code override."""
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code

    def show(self, file: Optional[IO[Any]] = None) -> None:
        """Print the error in the CLI's error format."""
        click.echo(f"✗ {self.format_message()}", file=file, err=True)


class InvalidInputError(CliError):
    """Bad method, malformed JSON body, malformed URL/domain or out-of-range budget."""

    exit_code = ExitCodes.INVALID_INPUT


class NothingToSelectError(CliError):
    """There are no candidates to offer in a selection prompt."""


class NoItemsSelectedError(CliError):
    """The user confirmed a selection prompt without choosing anything."""

    exit_code = ExitCodes.USER_ABORT


class RemoteError(CliError):
    """Network failure or non-success response from the management API."""

    exit_code = ExitCodes.NETWORK_ERROR


class RenderError(CliError):
    """A successful response could not be formatted for display."""

    exit_code = ExitCodes.RENDER_ERROR


def exit_code_for_status(status_code: int) -> int:
    """Map an HTTP status code to a CLI exit code."""
    if status_code == 404:
        return ExitCodes.NOT_FOUND
    if status_code in (401, 403):
        return ExitCodes.PERMISSION_DENIED
    return ExitCodes.NETWORK_ERROR


def wrap_error(exc: CliError, context: str) -> CliError:
    """Return a copy of ``exc`` whose message is prefixed with ``context``.

    The error class and exit code are preserved so the failure category stays
    visible at the command boundary.
    """
    wrapped = exc.__class__(f"{context}: {exc.message}", exit_code=exc.exit_code)
    wrapped.__cause__ = exc
    return wrapped


def format_success(message: str, data=None) -> None:
    """Format success messages consistently.

    Args:
        message: Success message to display
        data: Optional data to display with the message
    """
    click.echo(f"✓ {message}")
    if data:
        for key, value in data.items():
            click.echo(f"  {key}: {value}")


def get_ssl_verify() -> bool:
    """Return SSL verification setting from environment variable. Defaults to True."""
    env = os.environ.get("TCLI_SSL_VERIFY")
    if env is not None:
        return env.lower() not in ("0", "false", "no")
    return True


def get_request_timeout() -> float:
    """Return the HTTP timeout in seconds from TCLI_TIMEOUT. Defaults to 30."""
    env = os.environ.get("TCLI_TIMEOUT")
    if not env:
        return 30.0
    try:
        timeout = float(env)
    except ValueError:
        raise InvalidInputError(f"invalid TCLI_TIMEOUT value: {env!r}")
    if timeout <= 0:
        raise InvalidInputError(f"invalid TCLI_TIMEOUT value: {env!r}")
    return timeout


def env_flag(name: str) -> bool:
    """Return True when the environment variable is set to a truthy value."""
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON token {name!r}")


def loads_json(data: Any) -> Any:
    """Decode JSON text, rejecting the NaN/Infinity tokens json.loads allows by default."""
    return json.loads(data, parse_constant=_reject_constant)
