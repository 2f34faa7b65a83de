"""Argument checks that run before any request is sent"""

import urllib.parse
from typing import Any, Optional


def assert_not_none(value: Any, name: str) -> None:
    if value is None:
        raise ValueError(f"{name} must not be None")


def assert_not_none_or_empty(value: Optional[str], name: str) -> None:
    assert_not_none(value, name)
    if len(value) == 0:  # type: ignore[arg-type]
        raise ValueError(f"{name} must not be empty")


def assert_https_scheme(url: str, name: str) -> None:
    if urllib.parse.urlparse(url).scheme.lower() != "https":
        raise ValueError(f"{name} must use https: {url}")


def quote_path_segment(value: str) -> str:
    """Escapes a single path segment, i.e. / is escaped too"""
    return urllib.parse.quote(value, safe="")
