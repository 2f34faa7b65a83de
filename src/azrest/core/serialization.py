"""
Helpers for the field-by-field JSON mapping in the models of each service package.

The convention for every model: a dataclass whose fields all default to None (unless
required), a to_json that only writes fields that are defined, and a from_json
classmethod that ignores unknown keys and leaves missing keys as None.
"""
from __future__ import annotations

import datetime
from typing import Any, Callable, Dict, List, Optional, TypeVar

_T = TypeVar("_T")


def set_if_defined(target: Dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        target[key] = value


def to_json_list(values: Optional[List[Any]]) -> Optional[List[Dict[str, Any]]]:
    """Serializes a list of models, or returns None if the list itself is undefined"""
    if values is None:
        return None
    return [value.to_json() for value in values]


def from_json_list(
    values: Optional[List[Any]], from_json: Callable[[Any], _T]
) -> Optional[List[_T]]:
    if values is None:
        return None
    return [from_json(value) for value in values]


def from_json_optional(value: Any, from_json: Callable[[Any], _T]) -> Optional[_T]:
    if value is None:
        return None
    return from_json(value)


def parse_datetime(s: Optional[str]) -> Optional[datetime.datetime]:
    """
    Parses an ISO 8601 timestamp as returned by Azure APIs into an aware datetime.

    This isn't a simple fromisoformat because Azure timestamps can have more than 1/10^6
    second precision (e.g. 2020-01-01T00:00:00.3535722Z), so we need to chop off the
    extra digits first.
    """
    if s is None:
        return None

    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    main, sep, rest = s.partition(".")
    if sep:
        # rest is e.g. 3535722+00:00
        i = 0
        while i < len(rest) and rest[i].isdigit():
            i += 1
        frac, offset = rest[:i], rest[i:]
        s = f"{main}.{frac[:6].ljust(6, '0')}{offset}"

    try:
        result = datetime.datetime.fromisoformat(s)
    except ValueError as e:
        raise ValueError(f"Unable to parse timestamp from Azure: {s}") from e

    if result.tzinfo is None:
        result = result.replace(tzinfo=datetime.timezone.utc)
    return result


def format_datetime(dt: Optional[datetime.datetime]) -> Optional[str]:
    """Formats a datetime the way Azure APIs expect, naive datetimes are assumed UTC"""
    if dt is None:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    return dt.isoformat(timespec="microseconds") + "Z"
