import pytest

from resourcekit.exceptions import InvalidArgumentError
from resourcekit.services.pagination import (
    DEFAULT_PAGE_SIZE,
    Page,
    PageRequest,
    Sort,
    SortDirection,
    parse_page_request,
)


def test_empty_criteria_gives_default_page():
    request = parse_page_request({})
    assert request == PageRequest(page=0, size=DEFAULT_PAGE_SIZE)
    assert request.size == 50
    assert not request.is_sorted


def test_empty_size_counts_as_absent():
    assert parse_page_request({"size": "", "page": "3"}) == PageRequest(page=0, size=50)


def test_size_without_page_starts_at_first_page():
    assert parse_page_request({"size": "10"}) == PageRequest(page=0, size=10)


def test_size_and_page_without_complete_sort_are_unsorted():
    assert parse_page_request({"size": "10", "page": "2"}) == PageRequest(page=2, size=10)
    assert parse_page_request({"size": "10", "page": "2", "sortBy": "name"}).sort is None
    assert parse_page_request({"size": "10", "page": "2", "sortDirection": "ASC"}).sort is None


def test_sort_is_ignored_without_page():
    # Sorting is only honoured once both size and page are given
    assert parse_page_request({"size": "10", "sortBy": "name", "sortDirection": "ASC"}).sort is None


def test_full_request_is_sorted():
    request = parse_page_request({"size": "10", "page": "1", "sortBy": "name", "sortDirection": "ASC"})

    assert request == PageRequest(page=1, size=10, sort=Sort("name", SortDirection.ASC))
    assert request.offset == 10


@pytest.mark.parametrize("direction", ["DESC", "asc", "down", "whatever"])
def test_anything_but_exact_asc_sorts_descending(direction):
    request = parse_page_request({"size": "5", "page": "0", "sortBy": "name", "sortDirection": direction})
    assert request.sort.direction is SortDirection.DESC
    assert not request.sort.ascending


def test_filter_keys_do_not_affect_page_request():
    assert parse_page_request({"name": "admin", "size": "5"}) == PageRequest(page=0, size=5)


@pytest.mark.parametrize(
    "criteria, field",
    [
        ({"size": "ten"}, "size"),
        ({"size": "10", "page": "first"}, "page"),
        ({"size": "0"}, "size"),
        ({"size": "10", "page": "-1"}, "page"),
    ],
)
def test_malformed_or_out_of_range_values_raise(criteria, field):
    with pytest.raises(InvalidArgumentError) as exc_info:
        parse_page_request(criteria)

    assert exc_info.value.fields == [field]


def test_page_total_pages_and_map():
    page = Page(items=[1, 2], total=5, page=0, size=2)

    mapped = page.map(str)

    assert page.total_pages == 3
    assert mapped.items == ["1", "2"]
    assert (mapped.total, mapped.page, mapped.size) == (5, 0, 2)


def test_empty_page_has_no_pages():
    assert Page(items=[], total=0, page=0, size=10).total_pages == 0
