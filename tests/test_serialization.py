from __future__ import annotations

import datetime

import pytest

from azrest.core.arguments import (
    assert_https_scheme,
    assert_not_none_or_empty,
    quote_path_segment,
)
from azrest.core.paging import Page, iterate_pages
from azrest.core.serialization import format_datetime, parse_datetime


def test_parse_datetime() -> None:
    assert parse_datetime(None) is None
    assert parse_datetime("2020-01-01T00:00:00.3535722Z") == datetime.datetime(
        2020, 1, 1, 0, 0, 0, 353572, tzinfo=datetime.timezone.utc
    )
    assert parse_datetime("2020-01-01T00:00:00.5Z") == datetime.datetime(
        2020, 1, 1, 0, 0, 0, 500000, tzinfo=datetime.timezone.utc
    )
    assert parse_datetime("2021-06-30T10:11:12+00:00") == datetime.datetime(
        2021, 6, 30, 10, 11, 12, tzinfo=datetime.timezone.utc
    )
    # naive timestamps are UTC
    assert parse_datetime("2021-06-30T10:11:12").tzinfo == datetime.timezone.utc

    with pytest.raises(ValueError):
        parse_datetime("yesterday")


def test_format_datetime() -> None:
    assert format_datetime(None) is None
    assert (
        format_datetime(datetime.datetime(2020, 1, 1, 12, 30))
        == "2020-01-01T12:30:00.000000Z"
    )
    eastern = datetime.timezone(datetime.timedelta(hours=-5))
    assert (
        format_datetime(datetime.datetime(2020, 1, 1, 7, 30, tzinfo=eastern))
        == "2020-01-01T12:30:00.000000Z"
    )


def test_arguments() -> None:
    with pytest.raises(ValueError):
        assert_not_none_or_empty(None, "name")
    with pytest.raises(ValueError):
        assert_not_none_or_empty("", "name")
    assert_not_none_or_empty("x", "name")

    assert_https_scheme("https://x.search.windows.net", "endpoint")
    with pytest.raises(ValueError):
        assert_https_scheme("http://x.search.windows.net", "endpoint")

    assert quote_path_segment("a b/c") == "a%20b%2Fc"


def test_iterate_pages() -> None:
    pages = {
        "page2": Page([3, 4], "page3"),
        "page3": Page([5]),
    }
    requested = []

    def get_next(next_link: str) -> Page[int]:
        requested.append(next_link)
        return pages[next_link]

    iterator = iterate_pages(Page([1, 2], "page2"), get_next)
    assert next(iterator) == 1
    assert requested == []
    assert list(iterator) == [2, 3, 4, 5]
    assert requested == ["page2", "page3"]
