"""Typed access to the management API endpoints used by tcli commands."""

import json
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .api_request import build_request
from .dispatcher import Dispatcher
from .pagination import Page, PageOptions
from .reconcile import Entity
from .renderer import LogEntry
from .utils import RemoteError, exit_code_for_status


def _error_message(status_code: int, body: bytes) -> str:
    """Extract a readable message from an error response body."""
    try:
        data = json.loads(body)
    except ValueError:
        data = None

    if isinstance(data, dict):
        error = data.get("error") or ""
        message = data.get("message") or ""
        if error and message:
            return f"{status_code} {error}: {message}"
        if error or message:
            return f"{status_code} {error or message}"

    text = body.decode("utf-8", errors="replace").strip()
    return f"{status_code} {text}" if text else f"HTTP {status_code}"


def _has_more(data: Dict[str, Any], count: int) -> bool:
    total = data.get("total")
    start = data.get("start", 0)
    if not isinstance(total, int) or not isinstance(start, int):
        return False
    return start + count < total


class ManagementClient:
    """Paginated list and mutation endpoints of the management API."""

    def __init__(self, dispatcher: Dispatcher, domain: str) -> None:
        self.dispatcher = dispatcher
        self.domain = domain

    def request(
        self,
        method: str,
        path: str,
        payload: Optional[Any] = None,
        params: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            RemoteError: on transport failure or a non-2xx response
        """
        data = json.dumps(payload) if payload is not None else ""
        descriptor = build_request([method, path], self.domain, data, params)
        response = self.dispatcher.send(descriptor)

        if not response.ok:
            raise RemoteError(
                _error_message(response.status_code, response.body),
                exit_code=exit_code_for_status(response.status_code),
            )
        if not response.body.strip():
            return None
        try:
            return json.loads(response.body)
        except ValueError as exc:
            raise RemoteError(f"unexpected response from {path}: {exc}")

    def _list(
        self,
        path: str,
        key: str,
        options: PageOptions,
        params: Optional[Mapping[str, str]] = None,
    ) -> Page:
        query = options.as_params()
        query.update(params or {})
        data = self.request("GET", path, params=query)

        # endpoints answer with a bare list when totals are not available
        if isinstance(data, list):
            return Page(items=data, has_more=len(data) == options.per_page)
        if not isinstance(data, dict):
            return Page()
        items = data.get(key) or []
        return Page(items=items, has_more=_has_more(data, len(items)))

    def list_roles(self, options: PageOptions) -> Page:
        """Return one page of the tenant's roles."""
        page = self._list("roles", "roles", options)
        page.items = [Entity.from_dict(item) for item in page.items]
        return page

    def list_user_roles(self, user_id: str, options: PageOptions) -> Page:
        """Return one page of the roles assigned to a user."""
        page = self._list(f"users/{user_id}/roles", "roles", options)
        page.items = [Entity.from_dict(item) for item in page.items]
        return page

    def assign_user_roles(self, user_id: str, role_ids: Sequence[str]) -> None:
        """Assign roles to a user."""
        self.request("POST", f"users/{user_id}/roles", payload={"roles": list(role_ids)})

    def remove_user_roles(self, user_id: str, role_ids: Sequence[str]) -> None:
        """Remove roles from a user."""
        self.request("DELETE", f"users/{user_id}/roles", payload={"roles": list(role_ids)})

    def list_logs(self, options: PageOptions, query: Optional[str] = None) -> Page:
        """Return one page of tenant logs, newest first."""
        params: Dict[str, str] = {"sort": "date:-1"}
        if query:
            params["q"] = query
        page = self._list("logs", "logs", options, params)
        entries: List[LogEntry] = [
            LogEntry.from_dict(item) for item in page.items if isinstance(item, dict)
        ]
        page.items = entries
        return page
