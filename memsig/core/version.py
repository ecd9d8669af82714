"""Software version model and pairwise comparison."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Union

from .comparison import ComparisonResult
from .page import Page
from .part import Part
from .version_key import VersionKey

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 4096

PartSource = Union[Mapping[str, bytes], Iterable[Tuple[str, bytes]]]


@dataclass(frozen=True)
class UsablePages:
    """Pages of a version that may go into a signature, plus what was dropped."""

    pages: Tuple[Page, ...]
    special_count: int
    internal_duplicate_count: int


class Version:
    """
    One release of a product, made of named parts.

    Versions are ordered and compared by their :class:`VersionKey`, never by
    the raw version string. Parts are unique by name and kept in name order;
    every page iteration walks parts in that order, then pages by index.
    """

    def __init__(
        self,
        version_string: str,
        parts: PartSource,
        page_size: int = DEFAULT_PAGE_SIZE,
        path: Optional[Path] = None,
    ):
        self._version_string = version_string
        self._key = VersionKey(version_string)
        self._page_size = page_size
        self._path = Path(path) if path is not None else None

        items = parts.items() if isinstance(parts, Mapping) else parts
        by_name: Dict[str, Part] = {}
        for name, data in items:
            if name in by_name:
                raise ValueError(f"Duplicate part {name!r} in version {version_string}")
            by_name[name] = Part(self, name, data)
        self._parts = tuple(by_name[name] for name in sorted(by_name))
        self._contents: Dict[int, FrozenSet[bytes]] = {}

    @property
    def version_string(self) -> str:
        return self._version_string

    @property
    def key(self) -> VersionKey:
        return self._key

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @property
    def parts(self) -> Tuple[Part, ...]:
        return self._parts

    def number_of_parts(self) -> int:
        return len(self._parts)

    def _resolve(self, page_size: Optional[int]) -> int:
        return self._page_size if page_size is None else page_size

    def number_of_pages(self, page_size: Optional[int] = None) -> int:
        page_size = self._resolve(page_size)
        return sum(part.number_of_pages(page_size) for part in self._parts)

    def pages(self, page_size: Optional[int] = None) -> List[Page]:
        """All pages, in part name order then page index order."""
        page_size = self._resolve(page_size)
        return [page for part in self._parts for page in part.pages(page_size)]

    def page_contents(self, page_size: Optional[int] = None) -> FrozenSet[bytes]:
        page_size = self._resolve(page_size)
        contents = self._contents.get(page_size)
        if contents is None:
            contents = frozenset().union(*(part.page_contents(page_size) for part in self._parts))
            self._contents[page_size] = contents
        return contents

    def contains_page_content(self, page: Page) -> bool:
        """Check whether any page of any part has the same content as ``page``."""
        return page.data in self.page_contents(page.size)

    def internal_duplicates(self, page_size: Optional[int] = None) -> List[Page]:
        """
        Pages whose content occurs at least twice in this version.

        Every copy is reported, including the first one.
        """
        pages = self.pages(page_size)
        counts = Counter(page.data for page in pages)
        return [page for page in pages if counts[page.data] > 1]

    def usable_pages(self, page_size: Optional[int] = None) -> UsablePages:
        """
        Pages eligible for a signature.

        All-zero and all-one pages are dropped, and of every group of pages
        with identical content only the first one (in scan order) is kept.
        """
        kept: List[Page] = []
        seen = set()
        special = 0
        duplicates = 0

        for page in self.pages(page_size):
            if page.is_special:
                special += 1
                continue
            if page.data in seen:
                duplicates += 1
                continue
            seen.add(page.data)
            kept.append(page)

        return UsablePages(tuple(kept), special, duplicates)

    def compare_to(self, other: Version, page_size: Optional[int] = None) -> ComparisonResult:
        """
        Compare this version's pages against ``other``.

        Comparing a version with itself is answered directly: every page
        matches.
        """
        page_size = self._resolve(page_size)
        internal = len(self.internal_duplicates(page_size))

        if other is self:
            total = self.number_of_pages(page_size)
            return ComparisonResult(self, other, total, 0, internal)

        matches = 0
        uniques = 0
        for page in self.pages(page_size):
            if other.contains_page_content(page):
                matches += 1
            else:
                uniques += 1

        logger.debug(
            "Compared %s to %s: %d matches, %d uniques, %d internal duplicates",
            self, other, matches, uniques, internal,
        )
        return ComparisonResult(self, other, matches, uniques, internal)

    def identity_equals(self, other: Version) -> bool:
        return self._key == other._key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.identity_equals(other)

    def __hash__(self) -> int:
        return hash(self._key)

    def __lt__(self, other: Version) -> bool:
        return self._key < other._key

    def __str__(self) -> str:
        return self._version_string

    def __repr__(self) -> str:
        return f"Version({self._version_string!r}, parts={len(self._parts)})"
