"""
Page request parsing and the page value types returned by `find_all`.

`parse_page_request` resolves the pagination keys of a criteria map with
fixed precedence:

| size   | page   | sortBy + sortDirection | Result                                     |
| ------ | ------ | ---------------------- | ------------------------------------------ |
| absent | -      | -                      | page 0, size 50, unsorted                  |
| set    | absent | -                      | page 0, given size, unsorted               |
| set    | set    | either absent          | given page and size, unsorted              |
| set    | set    | both set               | given page and size, sorted (ASC or DESC)  |

"Absent" also covers the empty string. Only the exact value "ASC" sorts
ascending; every other direction sorts descending.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from math import ceil
from typing import Callable, Generic, Mapping, TypeVar

from resourcekit.exceptions.base import InvalidArgumentError

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_PAGE_SIZE = 50

SIZE_KEY = "size"
PAGE_KEY = "page"
SORT_BY_KEY = "sortBy"
SORT_DIRECTION_KEY = "sortDirection"

# Keys consumed by the page request parser; query builders must not treat them as filters.
PAGINATION_KEYS = frozenset({SIZE_KEY, PAGE_KEY, SORT_BY_KEY, SORT_DIRECTION_KEY})


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


@dataclass(frozen=True)
class Sort:
    property: str
    direction: SortDirection = SortDirection.ASC

    @property
    def ascending(self) -> bool:
        return self.direction is SortDirection.ASC


@dataclass(frozen=True)
class PageRequest:
    page: int = 0
    size: int = DEFAULT_PAGE_SIZE
    sort: Sort | None = None

    def __post_init__(self):
        if self.page < 0:
            raise InvalidArgumentError(f"Page index must not be less than zero, got {self.page}", fields=[PAGE_KEY])
        if self.size < 1:
            raise InvalidArgumentError(f"Page size must not be less than one, got {self.size}", fields=[SIZE_KEY])

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def is_sorted(self) -> bool:
        return self.sort is not None


@dataclass
class Page(Generic[T]):
    """One slice of a paginated query plus the metadata needed to navigate the rest."""

    items: list[T] = field(default_factory=list)
    total: int = 0
    page: int = 0
    size: int = DEFAULT_PAGE_SIZE

    @property
    def total_pages(self) -> int:
        return ceil(self.total / self.size) if self.size else 0

    def map(self, fn: Callable[[T], R]) -> "Page[R]":
        return Page(items=[fn(item) for item in self.items], total=self.total, page=self.page, size=self.size)


def _parse_int(criteria: Mapping[str, str], key: str) -> int:
    raw = criteria[key]
    try:
        return int(raw)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"Invalid integer for '{key}': {raw!r}", fields=[key]) from e


def parse_page_request(criteria: Mapping[str, str]) -> PageRequest:
    """
    Build a PageRequest from the pagination keys of a criteria map.

    Raises:
        InvalidArgumentError: `size`/`page` are not integers, or are out of range.
    """
    if not criteria.get(SIZE_KEY):
        return PageRequest(page=0, size=DEFAULT_PAGE_SIZE)

    size = _parse_int(criteria, SIZE_KEY)

    if not criteria.get(PAGE_KEY):
        return PageRequest(page=0, size=size)

    page = _parse_int(criteria, PAGE_KEY)

    sort_by = criteria.get(SORT_BY_KEY)
    sort_direction = criteria.get(SORT_DIRECTION_KEY)
    if not sort_by or not sort_direction:
        return PageRequest(page=page, size=size)

    direction = SortDirection.ASC if sort_direction == SortDirection.ASC.value else SortDirection.DESC
    return PageRequest(page=page, size=size, sort=Sort(sort_by, direction))
