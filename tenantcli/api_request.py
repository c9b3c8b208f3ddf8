"""Translate free-form `tcli api` arguments into a validated request descriptor."""

import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence
from urllib.parse import parse_qs, quote, urlencode, urlsplit, urlunsplit

from .utils import InvalidInputError, loads_json

VALID_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")
API_ROOT = "/api/v2/"
# RFC 3986 path characters kept as-is; "%" keeps escapes already in the path
_PATH_SAFE = "/%:@!$&'()*+,;=~"

# hostname labels with an optional port, e.g. "acme.eu.example.com" or "localhost:3000"
_DOMAIN_PATTERN = re.compile(
    r"^(?=.{1,253}(?::\d{1,5})?$)"
    r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)*"
    r"(?::\d{1,5})?$"
)


@dataclass(frozen=True)
class RequestDescriptor:
    """A fully-qualified request ready to be dispatched."""

    method: str
    url: str
    body: bytes = b""


def resolve_method(args: Sequence[str], data: str = "") -> str:
    """Resolve the HTTP method from the positional arguments.

    A single positional argument is the path: the method defaults to GET, or
    POST when a body was supplied. With two arguments the first one is the
    method, matched case-insensitively.
    """
    if len(args) == 1:
        method = "POST" if data else "GET"
    else:
        method = args[0].upper()

    if method not in VALID_METHODS:
        raise InvalidInputError(
            f"invalid method given: {method}, accepting only {', '.join(VALID_METHODS)}"
        )
    return method


def validate_data(data: str) -> bytes:
    """Return the body bytes, rejecting non-empty input that is not valid JSON."""
    if not data:
        return b""
    try:
        loads_json(data)
    except ValueError:
        raise InvalidInputError(f"invalid json data given: {data}")
    return data.encode("utf-8")


def resolve_url(domain: str, path: str, query_params: Optional[Mapping[str, str]] = None) -> str:
    """Build the absolute API URL for ``path`` on the tenant ``domain``.

    Query parameters already embedded in ``path`` are kept unless an explicit
    parameter with the same key overrides them. The query string is encoded
    with keys in alphabetical order.
    """
    if not domain or not _DOMAIN_PATTERN.match(domain):
        raise InvalidInputError(f"invalid domain given: {domain!r}")

    raw = "https://" + domain + API_ROOT + path.strip("/")
    try:
        parts = urlsplit(raw)
        # accessing the port validates it
        parts.port
    except ValueError as exc:
        raise InvalidInputError(f"invalid uri given: {exc}")

    params: Dict[str, List[str]] = parse_qs(parts.query, keep_blank_values=True)
    for key, value in (query_params or {}).items():
        params[key] = [value]

    query = urlencode(sorted(params.items()), doseq=True)
    path = quote(parts.path, safe=_PATH_SAFE)
    return urlunsplit((parts.scheme, parts.netloc, path, query, ""))


def build_request(
    args: Sequence[str],
    domain: str,
    data: str = "",
    query_params: Optional[Mapping[str, str]] = None,
) -> RequestDescriptor:
    """Build a RequestDescriptor from ``[method] <path>`` arguments, body and query params."""
    if not 1 <= len(args) <= 2:
        raise InvalidInputError(f"expected [method] <path>, got {len(args)} argument(s)")

    method = resolve_method(args, data)
    body = validate_data(data)
    url = resolve_url(domain, args[-1], query_params)
    return RequestDescriptor(method=method, url=url, body=body)
