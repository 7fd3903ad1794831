from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class Page:
    """A site page offered by ``%pages%`` selects."""

    id: int | str
    title: str


class PageLister(Protocol):
    """Source of the pages used to materialize ``%pages%`` option sets."""

    def list_pages(self) -> Sequence[Page]:
        ...


class StaticPageLister:
    """:class:`PageLister` over a fixed list of pages."""

    def __init__(self, pages: Iterable[Page] = ()) -> None:
        self._pages = list(pages)

    def list_pages(self) -> Sequence[Page]:
        return list(self._pages)


__all__ = ["Page", "PageLister", "StaticPageLister"]
