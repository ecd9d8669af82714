"""Pairwise comparison statistics between two versions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Optional

if TYPE_CHECKING:
    from .version import Version


@dataclass(frozen=True)
class ComparisonResult:
    """
    Result of comparing ``version`` against ``compared_version``.

    ``matches`` counts pages of ``version`` whose content also occurs in
    ``compared_version``; ``uniques`` counts the rest. Both are taken over all
    pages, internal duplicates included, so they always add up to the page
    count of ``version``. ``internal_duplicates`` counts every page of
    ``version`` whose content occurs more than once within ``version``.
    """

    version: Version
    compared_version: Version
    matches: int
    uniques: int
    internal_duplicates: int

    @property
    def total_pages(self) -> int:
        return self.matches + self.uniques

    @property
    def match_ratio(self) -> float:
        """Share of matching pages, 0.0 for an empty version."""
        if self.total_pages == 0:
            return 0.0
        return self.matches / self.total_pages


# version -> compared version -> result (None on the diagonal)
ComparisonMatrix = Dict["Version", Dict["Version", Optional[ComparisonResult]]]
