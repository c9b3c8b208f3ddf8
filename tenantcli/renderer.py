"""Render API responses and records for the terminal."""

import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import IO, Any, Dict, List, Optional, Sequence

import click
from tabulate import tabulate

from .reconcile import Entity
from .utils import RenderError, loads_json

_JSON_TOKEN = re.compile(
    r'(?P<string>"(?:\\.|[^"\\])*")(?P<colon>\s*:)?'
    r"|(?P<literal>\btrue\b|\bfalse\b|\bnull\b)"
    r"|(?P<number>-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)"
)


def colorize_json(text: str) -> str:
    """Add ANSI styles to pretty-printed JSON text."""

    def _style(match: "re.Match[str]") -> str:
        if match.group("string") is not None:
            if match.group("colon") is not None:
                return click.style(match.group("string"), fg="blue") + match.group("colon")
            return click.style(match.group("string"), fg="green")
        return click.style(match.group(0), fg="yellow")

    return _JSON_TOKEN.sub(_style, text)


def _nested_str(data: Any, section: str, key: str) -> str:
    """Return ``data[section][key]`` when it is a string, else an empty string."""
    if not isinstance(data, dict):
        return ""
    nested = data.get(section)
    if not isinstance(nested, dict):
        return ""
    value = nested.get(key)
    return value if isinstance(value, str) else ""


@dataclass(frozen=True)
class LogDetails:
    """Optional fields pulled from a log record's free-form details map."""

    user_agent: str = ""
    error_type: str = ""
    error_message: str = ""

    @classmethod
    def from_dict(cls, details: Any) -> "LogDetails":
        """Decode details, ignoring sections that are missing or of the wrong type."""
        return cls(
            user_agent=_nested_str(details, "request", "userAgent"),
            error_type=_nested_str(details, "error", "type"),
            error_message=_nested_str(details, "error", "message"),
        )


@dataclass(frozen=True)
class LogEntry:
    """A tenant log/audit record."""

    type: str = ""
    date: Optional[datetime] = None
    client_name: str = ""
    client_id: str = ""
    details: LogDetails = field(default_factory=LogDetails)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LogEntry":
        """Create a LogEntry from an API payload."""
        return cls(
            type=str(data.get("type") or ""),
            date=_parse_timestamp(data.get("date")),
            client_name=str(data.get("client_name") or ""),
            client_id=str(data.get("client_id") or ""),
            details=LogDetails.from_dict(data.get("details")),
        )


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_rfc3339(value: Optional[datetime]) -> str:
    """Format a timestamp as RFC 3339 with second precision ("Z" for UTC)."""
    if value is None:
        return "-"
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.replace(microsecond=0).isoformat()
    return text[:-6] + "Z" if text.endswith("+00:00") else text


def _quote(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


class Renderer:
    """Write formatted output to a text stream.

    Args:
        writer: Output stream; defaults to click's stdout
        color: False disables styling, True forces it, None lets click decide
            based on whether the stream is a terminal
        json_output: Render lists as JSON instead of tables
    """

    def __init__(
        self,
        writer: Optional[IO[str]] = None,
        color: Optional[bool] = None,
        json_output: bool = False,
    ) -> None:
        self.writer = writer
        self.color = color
        self.json_output = json_output

    @property
    def styled(self) -> bool:
        return self.color is not False

    def output(self, text: str) -> None:
        click.echo(text, file=self.writer, color=self.color)

    def json(self, body: bytes) -> None:
        """Pretty-print a JSON response body with two-space indentation."""
        if not body.strip():
            return
        try:
            data = loads_json(body)
        except ValueError as exc:
            raise RenderError(f"failed to prepare json output: {exc}")

        text = json.dumps(data, indent=2, ensure_ascii=False)
        self.output(colorize_json(text) if self.styled else text)

    def log_line(self, entry: LogEntry) -> str:
        """Format one log entry as a single line."""
        log_type = entry.type
        if self.styled:
            # success events start with "s", failures with "f"
            if log_type.startswith("s"):
                log_type = click.style(log_type, fg="green")
            elif log_type.startswith("f"):
                log_type = click.style(log_type, fg="bright_red")

        line = (
            f"[{format_rfc3339(entry.date)}] ({log_type}) "
            f"client_name={_quote(entry.client_name)} client_id={_quote(entry.client_id)}"
        )

        details = entry.details
        if details.user_agent:
            line += f" user_agent={_quote(details.user_agent)}"
        if details.error_type or details.error_message:
            line += (
                f" error_type={_quote(details.error_type)}"
                f" error_message={_quote(details.error_message)}"
            )
        return line

    def log_list(self, entries: Sequence[LogEntry]) -> None:
        """Write one line per log entry."""
        if not entries:
            self.output("No logs found.")
            return
        for entry in entries:
            self.output(self.log_line(entry))

    def role_list(self, roles: Sequence[Entity], empty_message: str = "No roles found.") -> None:
        """Write roles as a table, or as a JSON list when JSON output is requested."""
        if self.json_output:
            self.output(json.dumps([role.to_dict() for role in roles], indent=2))
            return
        if not roles:
            self.output(empty_message)
            return

        headers: List[str] = ["ID", "NAME", "DESCRIPTION"]
        if self.styled:
            headers = [click.style(h, fg="blue", bold=True) for h in headers]
        rows = [[role.id, role.name, role.description] for role in roles]
        self.output(tabulate(rows, headers=headers, tablefmt="github"))
        self.output(f"\nTotal: {len(roles)} role(s)")
