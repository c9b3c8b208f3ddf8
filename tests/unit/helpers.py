"""Test helpers for tenantcli unit tests."""

import json
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple
from urllib.parse import parse_qs, urlsplit

TENANT = "acme.example.com"
TOKEN = "test-token"


class MockResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(
        self, json_data: Any = None, status_code: int = 200, content: Optional[bytes] = None
    ) -> None:
        self.status_code = status_code
        if content is not None:
            self.content = content
        elif json_data is None:
            self.content = b""
        else:
            self.content = json.dumps(json_data).encode("utf-8")


Handler = Callable[[str, str, Dict[str, str], bytes], MockResponse]


class FakeSession:
    """Records requests and answers them through a handler function."""

    def __init__(self, handler: Optional[Handler] = None) -> None:
        self.handler = handler or (lambda method, path, params, body: MockResponse({}))
        self.calls: List[Dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> MockResponse:
        parts = urlsplit(url)
        params = {key: values[-1] for key, values in parse_qs(parts.query).items()}
        body = kwargs.get("data") or b""
        self.calls.append(
            {
                "method": method,
                "url": url,
                "path": parts.path,
                "params": params,
                "body": body,
                "headers": kwargs.get("headers", {}),
            }
        )
        return self.handler(method, parts.path, params, body)

    def paths(self) -> List[Tuple[str, str]]:
        """Return (method, path) for every recorded call."""
        return [(call["method"], call["path"]) for call in self.calls]


class BusyRecorder:
    """Busy indicator factory that counts enters and exits."""

    def __init__(self) -> None:
        self.entered = 0
        self.exited = 0

    @contextmanager
    def __call__(self) -> Iterator[None]:
        self.entered += 1
        try:
            yield
        finally:
            self.exited += 1


class FakePrompt:
    """Multi-select prompt that records options and picks by identifier."""

    def __init__(self, pick: Optional[List[str]] = None) -> None:
        self.pick = pick
        self.calls: List[Tuple[str, List[Any]]] = []

    def __call__(self, message: str, options: List[Any]) -> Optional[List[Any]]:
        self.calls.append((message, list(options)))
        if self.pick is None:
            return None
        return [option for option in options if option.entity.id in self.pick]


def paged(items: List[Dict[str, Any]], params: Dict[str, str], key: str) -> MockResponse:
    """Serve ``items`` as a management API page for the given query params."""
    page = int(params.get("page", 0))
    per_page = int(params.get("per_page", 50))
    start = page * per_page
    chunk = items[start : start + per_page]
    return MockResponse(
        {key: chunk, "start": start, "limit": per_page, "length": len(chunk), "total": len(items)}
    )
