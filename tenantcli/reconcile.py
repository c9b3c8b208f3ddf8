"""Choose which named entities to attach to or detach from a resource.

The add flow offers every entity of the universe that is not already
assigned; the remove flow offers the current assignments. Options travel
through the prompt as ``SelectionOption`` objects, so the chosen identifiers
never have to be parsed back out of display strings.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence

import click
import questionary

from .utils import InvalidInputError, NoItemsSelectedError, NothingToSelectError


@dataclass(frozen=True)
class Entity:
    """An identifiable record with a display name, such as a role."""

    id: str
    name: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Entity":
        """Create an Entity from an API payload."""
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name") or ""),
            description=str(data.get("description") or ""),
        )

    def to_dict(self) -> Dict[str, str]:
        """Convert the entity to a dictionary for JSON output."""
        return {"id": self.id, "name": self.name, "description": self.description}


@dataclass(frozen=True)
class SelectionOption:
    """A prompt option pairing an entity with its display title."""

    entity: Entity

    @property
    def title(self) -> str:
        return f"{self.entity.id} (Name: {self.entity.name})"

    @staticmethod
    def identifier_from_title(title: str) -> str:
        """Return the identifier part of an option title (text before the first space)."""
        return title.strip().split(" ", 1)[0]


class MultiSelectPrompt(Protocol):
    """Present options and return the chosen subset, or None if the prompt was interrupted."""

    def __call__(
        self, message: str, options: Sequence[SelectionOption]
    ) -> Optional[List[SelectionOption]]: ...


def checkbox_prompt(
    message: str, options: Sequence[SelectionOption]
) -> Optional[List[SelectionOption]]:
    """Ask the user to pick any number of options with a terminal checkbox list."""
    choices = [questionary.Choice(title=option.title, value=option) for option in options]
    return questionary.checkbox(message, choices=choices).ask()


def _check_identifiers(entities: Iterable[Entity], kind: str) -> None:
    for entity in entities:
        if not entity.id or any(ch.isspace() for ch in entity.id):
            raise InvalidInputError(f"cannot offer {kind} with invalid ID {entity.id!r}")


def parse_ids(values: Iterable[str]) -> List[str]:
    """Normalize identifiers given on the command line.

    Accepts comma-separated lists and option titles such as
    ``"rol_123 (Name: Admin)"``.
    """
    ids: List[str] = []
    for value in values:
        for part in value.split(","):
            if part.strip():
                ids.append(SelectionOption.identifier_from_title(part))
    return ids


class Reconciler:
    """Compute relationship diffs and prompt for the entities to change."""

    def __init__(self, prompt: MultiSelectPrompt = checkbox_prompt, kind: str = "role") -> None:
        self.prompt = prompt
        self.kind = kind

    def available(self, universe: Sequence[Entity], current: Sequence[Entity]) -> List[Entity]:
        """Return the entities of ``universe`` not present in ``current``, in universe order."""
        assigned = {entity.id for entity in current}
        return [entity for entity in universe if entity.id not in assigned]

    def pick_to_add(
        self, resource_id: str, universe: Sequence[Entity], current: Sequence[Entity]
    ) -> List[str]:
        """Prompt for unassigned entities and return the chosen identifiers."""
        candidates = self.available(universe, current)
        if not candidates:
            raise NothingToSelectError(
                f"the user with ID {resource_id!r} has all {self.kind}s assigned already"
            )
        return self._select(candidates)

    def pick_to_remove(self, resource_id: str, current: Sequence[Entity]) -> List[str]:
        """Prompt for currently assigned entities and return the chosen identifiers."""
        if not current:
            raise NothingToSelectError(
                f"the user with ID {resource_id!r} has no {self.kind}s assigned"
            )
        return self._select(current)

    def _select(self, candidates: Sequence[Entity]) -> List[str]:
        _check_identifiers(candidates, self.kind)
        options = [SelectionOption(entity) for entity in candidates]

        selected = self.prompt(f"{self.kind.title()}s", options)
        if selected is None:
            raise click.Abort()
        if not selected:
            raise NoItemsSelectedError(f"required to select at least one {self.kind}")

        return [option.entity.id for option in selected]
