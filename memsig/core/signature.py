"""Signature: the pages unique to one version or one group of versions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Tuple, Union

from ..utils.files import atomic_write_bytes
from .page import Page

if TYPE_CHECKING:
    from .version import Version

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Signature:
    """
    Ordered page sequence plus the counters describing how it was derived.

    The first entry of ``versions`` is the version the pages were taken from.
    Page order is the order in which pages survived filtering and is the byte
    order of the signature file. Signatures are immutable once built.
    """

    versions: Tuple[Version, ...]
    page_size: int
    pages: Tuple[Page, ...] = ()
    all01_count: int = 0
    internal_duplicate_count: int = 0
    not_matching_in_group_count: int = 0
    other_version_duplicate_count: int = 0

    @property
    def primary_version(self) -> Version:
        return self.versions[0]

    @property
    def is_group_signature(self) -> bool:
        return len(self.versions) > 1

    def number_of_pages(self) -> int:
        return len(self.pages)

    def page_bytes(self, index: int) -> bytes:
        return self.pages[index].data

    def to_bytes(self) -> bytes:
        """Raw concatenation of all page contents, no header."""
        return b"".join(page.data for page in self.pages)

    def page_details(self) -> List[Tuple[str, int]]:
        """(part name, page index) for every page, in signature order."""
        return [(page.part.name, page.page_number) for page in self.pages]

    def label(self, separator: str = "+") -> str:
        return separator.join(str(v) for v in self.versions)

    def write_to_file(self, path: Union[str, Path]) -> Path:
        """
        Write the signature payload to ``path``.

        The file only appears under its final name once fully written.
        """
        path = Path(path)
        atomic_write_bytes(path, self.to_bytes())
        logger.debug("Wrote signature for %s (%d pages) to %s", self.label(), len(self.pages), path)
        return path

    def counters(self) -> Dict[str, int]:
        return {
            "sigSize": self.number_of_pages(),
            "all01": self.all01_count,
            "intDup": self.internal_duplicate_count,
            "dupsOtherVersions": self.other_version_duplicate_count,
            "notMatchingInGroup": self.not_matching_in_group_count,
        }
