"""Execute request descriptors against the management API with bearer auth."""

from dataclasses import dataclass
from typing import Callable, Dict, Optional

import click
import requests

from ._version import __version__
from .api_request import RequestDescriptor
from .spinner import BusyIndicator, waiting
from .utils import RemoteError, get_request_timeout, get_ssl_verify

USER_AGENT = "tenant-cli"


@dataclass(frozen=True)
class ApiResponse:
    """Status code and raw body of a completed request."""

    status_code: int
    body: bytes

    @property
    def ok(self) -> bool:
        """Return True for 2xx responses."""
        return 200 <= self.status_code < 300


def user_agent() -> str:
    """Return the product-identifying User-Agent value."""
    return f"{USER_AGENT}/{__version__.lstrip('v')}"


class Dispatcher:
    """Send one request per call with the tenant's bearer credential.

    Each call performs exactly one blocking HTTP exchange, never retried. The
    busy indicator is held for the duration of the exchange and released on
    every exit path. Non-2xx responses are returned as-is; only transport
    failures raise.
    """

    def __init__(
        self,
        tenant: str,
        credential_for: Callable[[str], str],
        session: Optional[requests.Session] = None,
        busy: BusyIndicator = waiting,
        debug: bool = False,
    ) -> None:
        self.tenant = tenant
        self.credential_for = credential_for
        self.session = session if session is not None else requests.Session()
        self.busy = busy
        self.debug = debug

    def headers(self) -> Dict[str, str]:
        """Return the standard headers for a management API request."""
        return {
            "Authorization": f"Bearer {self.credential_for(self.tenant)}",
            "Content-Type": "application/json",
            "User-Agent": user_agent(),
        }

    def send(self, request: RequestDescriptor) -> ApiResponse:
        """Dispatch ``request`` and return its status and body.

        Raises:
            RemoteError: if the request could not be sent or no response arrived.
        """
        headers = self.headers()
        if self.debug:
            click.echo(f"> {request.method} {request.url}", err=True)

        with self.busy():
            try:
                resp = self.session.request(
                    request.method,
                    request.url,
                    data=request.body,
                    headers=headers,
                    timeout=get_request_timeout(),
                    verify=get_ssl_verify(),
                )
            except requests.RequestException as exc:
                raise RemoteError(f"failed to send request: {exc}") from exc

        if self.debug:
            click.echo(f"< {resp.status_code}", err=True)
        return ApiResponse(status_code=resp.status_code, body=resp.content)
