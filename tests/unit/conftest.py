"""Unit test configuration - runs before any test collection or imports.

Forces the keyring null backend so no test touches a real system keyring,
and blocks real HTTP calls. Tests that need HTTP inject a FakeSession
through CliContext.
"""

from typing import Any, Callable, Optional

import keyring
import pytest
import requests
from keyring.backends.null import Keyring as NullKeyring

from tenantcli.context import CliContext

from .helpers import TENANT, TOKEN, BusyRecorder, FakePrompt, FakeSession

# Force the null backend BEFORE any test triggers a real keyring call.
keyring.set_keyring(NullKeyring())


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    """Keep tests away from real config files, environment and network."""
    monkeypatch.setenv("TCLI_CONFIG", str(tmp_path / "config.json"))
    for name in ("TCLI_TENANT", "TCLI_ACCESS_TOKEN", "TCLI_DEBUG", "TCLI_TIMEOUT", "NO_COLOR"):
        monkeypatch.delenv(name, raising=False)

    def blocked_request(*args: Any, **kwargs: Any) -> None:
        raise AssertionError("unit tests must not make real HTTP requests")

    monkeypatch.setattr(requests.Session, "request", blocked_request)


@pytest.fixture
def busy() -> BusyRecorder:
    return BusyRecorder()


@pytest.fixture
def make_context(busy: BusyRecorder) -> Callable[..., CliContext]:
    """Build a CliContext wired to fakes."""

    def _make(
        session: Optional[FakeSession] = None,
        prompt: Optional[FakePrompt] = None,
        **kwargs: Any,
    ) -> CliContext:
        kwargs.setdefault("tenant", TENANT)
        return CliContext(
            credential_for=lambda tenant: TOKEN,
            session=session or FakeSession(),
            prompt=prompt or FakePrompt(),
            busy=busy,
            **kwargs,
        )

    return _make
