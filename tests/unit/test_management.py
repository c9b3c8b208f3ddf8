"""Unit tests for the typed management API client."""

import json

import pytest

from tenantcli.dispatcher import Dispatcher
from tenantcli.management import ManagementClient, _error_message
from tenantcli.pagination import PageOptions
from tenantcli.utils import ExitCodes, RemoteError

from .helpers import TENANT, TOKEN, BusyRecorder, FakeSession, MockResponse


def make_client(handler) -> ManagementClient:
    dispatcher = Dispatcher(
        tenant=TENANT,
        credential_for=lambda tenant: TOKEN,
        session=FakeSession(handler),
        busy=BusyRecorder(),
    )
    return ManagementClient(dispatcher, TENANT)


@pytest.mark.parametrize(
    "body, expected",
    [
        (b'{"error": "Not Found", "message": "No user"}', "404 Not Found: No user"),
        (b'{"message": "No user"}', "404 No user"),
        (b"gateway down", "404 gateway down"),
        (b"", "HTTP 404"),
    ],
)
def test_error_message(body: bytes, expected: str) -> None:
    assert _error_message(404, body) == expected


def test_page_with_totals() -> None:
    client = make_client(
        lambda method, path, params, body: MockResponse(
            {"roles": [{"id": "rol_1"}], "start": 0, "total": 2}
        )
    )

    page = client.list_roles(PageOptions(page=0, per_page=1))

    assert [r.id for r in page.items] == ["rol_1"]
    assert page.has_more is True


def test_last_page_with_totals() -> None:
    client = make_client(
        lambda method, path, params, body: MockResponse(
            {"roles": [{"id": "rol_2"}], "start": 1, "total": 2}
        )
    )
    assert client.list_roles(PageOptions(page=1, per_page=1)).has_more is False


def test_bare_list_page() -> None:
    client = make_client(
        lambda method, path, params, body: MockResponse([{"id": "rol_1"}, {"id": "rol_2"}])
    )
    assert client.list_roles(PageOptions(page=0, per_page=2)).has_more is True
    assert client.list_roles(PageOptions(page=0, per_page=3)).has_more is False


def test_user_roles_path_and_logs_params() -> None:
    session_calls = []

    def handler(method, path, params, body):
        session_calls.append((method, path, params))
        return MockResponse({"roles": [], "logs": [], "total": 0})

    client = make_client(handler)
    client.list_user_roles("auth0|1", PageOptions(page=0, per_page=10))
    client.list_logs(PageOptions(page=2, per_page=10), "type:s")

    assert session_calls[0][1] == "/api/v2/users/auth0%7C1/roles"
    method, path, params = session_calls[1]
    assert path == "/api/v2/logs"
    assert params["page"] == "2"
    assert params["q"] == "type:s"
    assert params["sort"] == "date:-1"


def test_mutation_sends_role_ids() -> None:
    bodies = []

    def handler(method, path, params, body):
        bodies.append((method, json.loads(body)))
        return MockResponse(status_code=204)

    client = make_client(handler)
    client.assign_user_roles("auth0|1", ["rol_1"])
    client.remove_user_roles("auth0|1", ("rol_2", "rol_3"))

    assert bodies == [("POST", {"roles": ["rol_1"]}), ("DELETE", {"roles": ["rol_2", "rol_3"]})]


def test_error_status_maps_exit_code() -> None:
    client = make_client(
        lambda method, path, params, body: MockResponse({"error": "Unauthorized"}, status_code=401)
    )

    with pytest.raises(RemoteError) as exc_info:
        client.list_roles(PageOptions(page=0, per_page=50))

    assert exc_info.value.exit_code == ExitCodes.PERMISSION_DENIED
    assert exc_info.value.message == "401 Unauthorized"
