from __future__ import annotations

import dataclasses
from typing import (
    AsyncIterator,
    Awaitable,
    Callable,
    Generic,
    Iterator,
    List,
    Optional,
    TypeVar,
)

_T = TypeVar("_T")


@dataclasses.dataclass
class Page(Generic[_T]):
    """
    One page of a list operation. next_link is the absolute url of the next page, to be
    passed to the corresponding *_next operation, or None if this is the last page.
    """

    values: List[_T]
    next_link: Optional[str] = None

    def __iter__(self) -> Iterator[_T]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)


def iterate_pages(
    first_page: Page[_T], get_next: Callable[[str], Page[_T]]
) -> Iterator[_T]:
    """
    Walks first_page and every following page by calling get_next with each next_link.
    Pages are only requested as the caller iterates.
    """
    page = first_page
    while True:
        yield from page.values
        if not page.next_link:
            return
        page = get_next(page.next_link)


async def iterate_pages_async(
    first_page: Page[_T], get_next: Callable[[str], Awaitable[Page[_T]]]
) -> AsyncIterator[_T]:
    """See iterate_pages"""
    page = first_page
    while True:
        for value in page.values:
            yield value
        if not page.next_link:
            return
        page = await get_next(page.next_link)
