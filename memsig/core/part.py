"""Named byte blob extracted from a binary, e.g. a loadable segment."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, FrozenSet, Tuple

from .page import Page

if TYPE_CHECKING:
    from .version import Version


def pages_needed(length: int, page_size: int) -> int:
    """Number of pages required to hold ``length`` bytes."""
    num_pages, rest = divmod(length, page_size)
    if rest > 0:
        num_pages += 1
    return num_pages


class Part:
    """
    One named part of a :class:`Version`'s binary.

    A part has no page size of its own. Every page-dependent accessor takes
    the page size as an argument and pads the last page with zero bytes up to
    the page boundary. ``data`` never contains that padding.
    """

    def __init__(self, version: Version, name: str, data: bytes):
        self._version = version
        self._name = name
        self._data = bytes(data)
        self._pages: Dict[int, Tuple[Page, ...]] = {}
        self._contents: Dict[int, FrozenSet[bytes]] = {}

    @property
    def name(self) -> str:
        return self._name

    @property
    def version(self) -> Version:
        return self._version

    @property
    def data(self) -> bytes:
        """Unpadded contents."""
        return self._data

    @property
    def length(self) -> int:
        return len(self._data)

    @property
    def identity_key(self) -> Tuple:
        return (self._version.key, self._name)

    def number_of_pages(self, page_size: int) -> int:
        return pages_needed(len(self._data), page_size)

    def padded_bytes(self, page_size: int) -> bytes:
        """Contents zero-padded to a multiple of ``page_size``."""
        padded_length = self.number_of_pages(page_size) * page_size
        return self._data.ljust(padded_length, b"\x00")

    def page_bytes(self, index: int, page_size: int) -> bytes:
        start = index * page_size
        chunk = self._data[start:start + page_size]
        return chunk.ljust(page_size, b"\x00")

    def page(self, index: int, page_size: int) -> Page:
        """Get a single page by index."""
        if not 0 <= index < self.number_of_pages(page_size):
            raise IndexError(f"Part {self._name} has no page {index} at page size {page_size}")
        return self.pages(page_size)[index]

    def pages(self, page_size: int) -> Tuple[Page, ...]:
        """
        All pages of the part for the given page size.

        The page objects are built once per page size and reused, so that
        per-page caches (all-zero/all-one checks) survive repeated scans.
        """
        pages = self._pages.get(page_size)
        if pages is None:
            pages = tuple(
                Page(self.page_bytes(i, page_size), self, i * page_size)
                for i in range(self.number_of_pages(page_size))
            )
            self._pages[page_size] = pages
        return pages

    def page_contents(self, page_size: int) -> FrozenSet[bytes]:
        """Set of distinct page contents, used as an exact lookup index."""
        contents = self._contents.get(page_size)
        if contents is None:
            contents = frozenset(p.data for p in self.pages(page_size))
            self._contents[page_size] = contents
        return contents

    def contains_page_content(self, page: Page) -> bool:
        """Check whether any page of this part has the same content as ``page``."""
        return page.data in self.page_contents(page.size)

    def content_equals(self, other: Part) -> bool:
        return self._data == other._data

    def identity_equals(self, other: Part) -> bool:
        return self.identity_key == other.identity_key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Part):
            return NotImplemented
        return self.identity_equals(other)

    def __hash__(self) -> int:
        return hash(self.identity_key)

    def __lt__(self, other: Part) -> bool:
        if self._version.key != other._version.key:
            return self._version.key < other._version.key
        return self._name < other._name

    def __repr__(self) -> str:
        return f"Part(name={self._name!r}, length={len(self._data)})"
