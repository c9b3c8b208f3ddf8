"""Per-invocation dependencies shared by tcli commands.

A ``CliContext`` is created once by the root command group and handed to
subcommands through ``click.pass_obj``. Tests pass their own instance via
``CliRunner.invoke(..., obj=...)`` to inject fake sessions and prompts.
"""

import os
from dataclasses import dataclass, field
from typing import IO, Callable, Optional

import requests

from .dispatcher import Dispatcher
from .management import ManagementClient
from .profiles import get_access_token, resolve_tenant
from .reconcile import MultiSelectPrompt, Reconciler, checkbox_prompt
from .renderer import Renderer
from .spinner import BusyIndicator, waiting
from .utils import env_flag


@dataclass
class CliContext:
    """Explicit configuration for one command run."""

    tenant: Optional[str] = None
    no_color: bool = False
    debug: bool = False
    credential_for: Callable[[str], str] = get_access_token
    session: Optional[requests.Session] = None
    prompt: MultiSelectPrompt = checkbox_prompt
    busy: BusyIndicator = waiting
    writer: Optional[IO[str]] = None
    _domain: Optional[str] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if "NO_COLOR" in os.environ:
            self.no_color = True
        if env_flag("TCLI_DEBUG"):
            self.debug = True

    @property
    def domain(self) -> str:
        """Return the active tenant domain, resolving it on first use."""
        if self._domain is None:
            self._domain = resolve_tenant(self.tenant)
        return self._domain

    def dispatcher(self) -> Dispatcher:
        return Dispatcher(
            tenant=self.domain,
            credential_for=self.credential_for,
            session=self.session,
            busy=self.busy,
            debug=self.debug,
        )

    def management(self) -> ManagementClient:
        return ManagementClient(self.dispatcher(), self.domain)

    def renderer(self, json_output: bool = False) -> Renderer:
        return Renderer(
            writer=self.writer,
            color=False if self.no_color else None,
            json_output=json_output,
        )

    def reconciler(self, kind: str = "role") -> Reconciler:
        return Reconciler(prompt=self.prompt, kind=kind)
