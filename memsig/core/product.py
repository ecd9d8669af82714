"""Product: all versions of one software title, and the signature engine."""

from __future__ import annotations

import bisect
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .comparison import ComparisonMatrix, ComparisonResult
from .errors import EmptyInputError
from .page import Page
from .signature import Signature
from .version import DEFAULT_PAGE_SIZE, Version

logger = logging.getLogger(__name__)


class Product:
    """
    A software title with all of its known versions.

    Versions are kept in canonical order (by :class:`VersionKey`); that order
    drives every output and every order-sensitive algorithm.
    """

    def __init__(
        self,
        name: str,
        binary_name: str = "",
        page_size: int = DEFAULT_PAGE_SIZE,
        versions: Iterable[Version] = (),
    ):
        self._name = name
        self._binary_name = binary_name
        self._page_size = page_size
        self._versions: List[Version] = []
        self._index: Dict[Version, int] = {}

        for version in versions:
            self.add_version(version)

    @property
    def name(self) -> str:
        return self._name

    @property
    def binary_name(self) -> str:
        return self._binary_name

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def versions(self) -> Tuple[Version, ...]:
        """All versions in canonical order."""
        return tuple(self._versions)

    def add_version(self, version: Version) -> None:
        """Add a version during initialization. Version keys must be unique."""
        if version in self._index:
            raise ValueError(
                f"Version {version} of {self._name} collides with an existing version key"
            )
        bisect.insort(self._versions, version)
        self._index = {v: i for i, v in enumerate(self._versions)}

    def index_of(self, version: Version) -> int:
        """Position of ``version`` in the canonical ordering."""
        if version not in self:
            raise ValueError(f"Version {version} does not belong to {self._name}")
        return self._index[version]

    def version(self, version_string: str) -> Version:
        """Look a version up by its version string."""
        for v in self._versions:
            if v.version_string == version_string:
                return v
        raise KeyError(version_string)

    def __contains__(self, version: object) -> bool:
        # A version of another product with an equal key is not a member.
        index = self._index.get(version)
        return index is not None and self._versions[index] is version

    def __len__(self) -> int:
        return len(self._versions)

    def _resolve(self, page_size: Optional[int]) -> int:
        return self._page_size if page_size is None else page_size

    # ------------------------------------------------------------------
    # Signatures
    # ------------------------------------------------------------------

    def generate_signature(
        self,
        group: Sequence[Version],
        page_size: Optional[int] = None,
    ) -> Signature:
        """
        Derive the signature shared by all versions in ``group``.

        Pages are taken from the first version of the group (parts in name
        order) and filtered in four stages:

        1. all-zero and all-one pages are dropped,
        2. only the first page of each distinct content is kept,
        3. for groups of two or more, pages missing from any other member
           are dropped,
        4. pages whose content occurs in any version outside the group are
           dropped.

        Raises:
            EmptyInputError: if ``group`` is empty
            ValueError: if a group member is not a version of this product
        """
        if not group:
            raise EmptyInputError(f"Cannot generate a signature for an empty group of {self._name}")
        for member in group:
            if member not in self:
                raise ValueError(f"Version {member} does not belong to {self._name}")

        page_size = self._resolve(page_size)
        first = group[0]

        usable = first.usable_pages(page_size)
        candidates: List[Page] = list(usable.pages)

        not_matching = 0
        if len(group) > 1:
            others_in_group = group[1:]
            in_group: List[Page] = []
            for page in candidates:
                if all(member.contains_page_content(page) for member in others_in_group):
                    in_group.append(page)
                else:
                    not_matching += 1
            candidates = in_group

        members = set(group)
        outsiders = [v for v in self._versions if v not in members]

        unique: List[Page] = []
        other_dups = 0
        for page in candidates:
            if any(v.contains_page_content(page) for v in outsiders):
                other_dups += 1
            else:
                unique.append(page)

        signature = Signature(
            versions=tuple(group),
            page_size=page_size,
            pages=tuple(unique),
            all01_count=usable.special_count,
            internal_duplicate_count=usable.internal_duplicate_count,
            not_matching_in_group_count=not_matching,
            other_version_duplicate_count=other_dups,
        )

        logger.debug(
            "Signature for %s: %d pages (all01=%d, intDup=%d, notInGroup=%d, otherDups=%d)",
            signature.label(), signature.number_of_pages(), usable.special_count,
            usable.internal_duplicate_count, not_matching, other_dups,
        )
        return signature

    def generate_version_signature(self, version: Version, page_size: Optional[int] = None) -> Signature:
        """Signature of a single version."""
        return self.generate_signature([version], page_size)

    def generate_signatures(self, page_size: Optional[int] = None) -> List[Signature]:
        """One signature per version, in canonical order."""
        page_size = self._resolve(page_size)
        logger.info("Generating %d version signatures for %s", len(self._versions), self._name)
        return [self.generate_version_signature(v, page_size) for v in self._versions]

    # ------------------------------------------------------------------
    # Comparisons
    # ------------------------------------------------------------------

    def compare_all_versions(self, page_size: Optional[int] = None) -> ComparisonMatrix:
        """
        Compare every version with every other version.

        Rows and columns follow canonical order; the diagonal holds ``None``.
        """
        page_size = self._resolve(page_size)
        logger.info("Comparing %d versions of %s pairwise", len(self._versions), self._name)

        matrix: ComparisonMatrix = {}
        for v in self._versions:
            row: Dict[Version, Optional[ComparisonResult]] = {}
            for u in self._versions:
                row[u] = None if v == u else v.compare_to(u, page_size)
            matrix[v] = row
        return matrix

    def __repr__(self) -> str:
        return f"Product({self._name!r}, versions={len(self._versions)})"
