"""Accumulate server-side paginated collections up to an item budget."""

from dataclasses import dataclass, field
from typing import Any, Callable, List

from .utils import InvalidInputError

DEFAULT_PAGE_SIZE = 50
MIN_ITEMS = 1
MAX_ITEMS = 1000


@dataclass(frozen=True)
class PageOptions:
    """Zero-based page index and page size for one list call."""

    page: int
    per_page: int

    def as_params(self) -> dict:
        """Return the query parameters for a management API list endpoint."""
        return {
            "page": str(self.page),
            "per_page": str(self.per_page),
            "include_totals": "true",
        }


@dataclass
class Page:
    """One page of a paginated collection."""

    items: List[Any] = field(default_factory=list)
    has_more: bool = False


FetchPage = Callable[[PageOptions], Page]


def validate_number(number: int) -> int:
    """Check that an item budget lies within [1, 1000]."""
    if number < MIN_ITEMS or number > MAX_ITEMS:
        raise InvalidInputError(
            f"number flag invalid, please pass a number between {MIN_ITEMS} and {MAX_ITEMS}"
        )
    return number


def get_with_pagination(
    limit: int,
    fetch: FetchPage,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> List[Any]:
    """Fetch pages until the collection is exhausted or ``limit`` items are collected.

    The page size is fixed for the whole run so that page offsets line up and
    no item is skipped or repeated. Errors raised by ``fetch`` propagate
    immediately and nothing collected so far is returned.

    Args:
        limit: Maximum number of items to return
        fetch: Callback returning one Page for the given PageOptions
        page_size: Upper bound for the number of items requested per call

    Returns:
        Items in fetch order, at most ``limit`` of them
    """
    validate_number(limit)
    per_page = min(limit, page_size)

    items: List[Any] = []
    page = 0
    while len(items) < limit:
        result = fetch(PageOptions(page=page, per_page=per_page))
        items.extend(result.items)
        page += 1
        if not result.has_more or not result.items:
            break

    return items[:limit]
