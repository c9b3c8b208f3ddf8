"""Unit tests for relationship reconciliation and selection."""

from typing import Any, List

import click
import pytest

from tenantcli import reconcile
from tenantcli.reconcile import Entity, Reconciler, SelectionOption, checkbox_prompt, parse_ids
from tenantcli.utils import (
    ExitCodes,
    InvalidInputError,
    NoItemsSelectedError,
    NothingToSelectError,
)

from .helpers import FakePrompt

A = Entity("rol_A", "Admin")
B = Entity("rol_B", "Billing")
C = Entity("rol_C", "Content")


class TestSelectionOption:
    """Tests for option titles and decoding."""

    def test_title_format(self) -> None:
        assert SelectionOption(Entity("rol_123", "Admin")).title == "rol_123 (Name: Admin)"

    def test_identifier_from_title(self) -> None:
        assert SelectionOption.identifier_from_title("rol_123 (Name: Admin)") == "rol_123"

    def test_identifier_from_bare_id(self) -> None:
        assert SelectionOption.identifier_from_title("rol_123") == "rol_123"

    def test_name_with_spaces_does_not_leak_into_id(self) -> None:
        title = SelectionOption(Entity("rol_9", "Read Only Users")).title
        assert SelectionOption.identifier_from_title(title) == "rol_9"


def test_parse_ids_accepts_lists_and_titles() -> None:
    assert parse_ids(["rol_1,rol_2", "rol_3 (Name: Ops)", " "]) == ["rol_1", "rol_2", "rol_3"]


def test_entity_from_dict_tolerates_missing_fields() -> None:
    assert Entity.from_dict({"id": "rol_1"}) == Entity("rol_1", "", "")
    assert Entity.from_dict({"id": "rol_1", "name": "Admin", "description": None}).name == "Admin"


class TestPickToAdd:
    """Tests for the add flow."""

    def test_offers_only_unassigned(self) -> None:
        prompt = FakePrompt(pick=["rol_C"])
        reconciler = Reconciler(prompt=prompt)

        ids = reconciler.pick_to_add("auth0|1", [A, B, C], [A])

        message, options = prompt.calls[0]
        assert message == "Roles"
        assert [o.entity for o in options] == [B, C]
        assert ids == ["rol_C"]

    def test_all_assigned_fails_without_prompt(self) -> None:
        prompt = FakePrompt(pick=["rol_A"])
        reconciler = Reconciler(prompt=prompt)

        with pytest.raises(NothingToSelectError, match="has all roles assigned already"):
            reconciler.pick_to_add("auth0|1", [A], [A])
        assert prompt.calls == []

    def test_diff_uses_identifiers_not_names(self) -> None:
        renamed = Entity("rol_A", "Administrator")
        assert Reconciler().available([A, B], [renamed]) == [B]

    def test_empty_selection_is_user_abort(self) -> None:
        reconciler = Reconciler(prompt=FakePrompt(pick=[]))

        with pytest.raises(NoItemsSelectedError) as exc_info:
            reconciler.pick_to_add("auth0|1", [A, B], [])
        assert exc_info.value.message == "required to select at least one role"
        assert exc_info.value.exit_code == ExitCodes.USER_ABORT

    def test_interrupted_prompt_aborts(self) -> None:
        reconciler = Reconciler(prompt=FakePrompt(pick=None))
        with pytest.raises(click.Abort):
            reconciler.pick_to_add("auth0|1", [A, B], [])

    def test_identifier_with_space_is_rejected(self) -> None:
        prompt = FakePrompt(pick=["rol 1"])
        reconciler = Reconciler(prompt=prompt)

        with pytest.raises(InvalidInputError):
            reconciler.pick_to_add("auth0|1", [Entity("rol 1", "Broken")], [])
        assert prompt.calls == []


class TestPickToRemove:
    """Tests for the remove flow."""

    def test_offers_current_assignments(self) -> None:
        prompt = FakePrompt(pick=["rol_A", "rol_B"])
        reconciler = Reconciler(prompt=prompt)

        ids = reconciler.pick_to_remove("auth0|1", [A, B])

        assert [o.entity for o in prompt.calls[0][1]] == [A, B]
        assert ids == ["rol_A", "rol_B"]

    def test_nothing_assigned(self) -> None:
        reconciler = Reconciler(prompt=FakePrompt(pick=[]))
        with pytest.raises(NothingToSelectError, match="has no roles assigned"):
            reconciler.pick_to_remove("auth0|1", [])

    def test_empty_selection_is_user_abort(self) -> None:
        reconciler = Reconciler(prompt=FakePrompt(pick=[]))
        with pytest.raises(NoItemsSelectedError):
            reconciler.pick_to_remove("auth0|1", [A])


def test_checkbox_prompt_carries_options_as_values(monkeypatch: Any) -> None:
    captured: List[Any] = []

    class FakeQuestion:
        def ask(self) -> List[Any]:
            return [captured[0][1][0].value]

    def fake_checkbox(message: str, choices: List[Any]) -> FakeQuestion:
        captured.append((message, choices))
        return FakeQuestion()

    monkeypatch.setattr(reconcile.questionary, "checkbox", fake_checkbox)
    options = [SelectionOption(A), SelectionOption(B)]

    selected = checkbox_prompt("Roles", options)

    message, choices = captured[0]
    assert message == "Roles"
    assert [choice.title for choice in choices] == ["rol_A (Name: Admin)", "rol_B (Name: Billing)"]
    assert selected == [options[0]]
