"""Group finder interface and the shared candidate split."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..core.errors import ConfigurationError, EmptyInputError
from ..core.product import Product
from ..core.signature import Signature
from .group import VersionGroup

logger = logging.getLogger(__name__)

DEFAULT_SIGSIZE_THRESHOLD = 0.5
DEFAULT_MAX_DISTANCE = 5


@dataclass(frozen=True)
class GroupAssignment:
    """One group of a configuration together with its signature."""

    group: VersionGroup
    signature: Signature

    @property
    def signature_size(self) -> int:
        return self.signature.number_of_pages()


@dataclass(frozen=True)
class CandidateSplit:
    """Solo signatures split by whether their version may join a group."""

    candidates: List[Signature]
    non_candidates: List[Signature]


def classify_candidates(
    solo_signatures: Sequence[Signature],
    page_size: int,
    sigsize_threshold: float,
) -> CandidateSplit:
    """
    Split versions into grouping candidates and singletons.

    A version whose solo signature already covers at least
    ``sigsize_threshold`` of its own pages stays on its own. The input order
    (canonical version order) is kept in both lists.
    """
    candidates: List[Signature] = []
    non_candidates: List[Signature] = []
    for signature in solo_signatures:
        own_pages = signature.primary_version.number_of_pages(page_size)
        if signature.number_of_pages() >= own_pages * sigsize_threshold:
            non_candidates.append(signature)
        else:
            candidates.append(signature)
    return CandidateSplit(candidates, non_candidates)


def validate_grouping_parameters(sigsize_threshold: float, max_distance: int) -> None:
    if not 0 < sigsize_threshold <= 1:
        raise ConfigurationError(
            f"Signature size threshold must be in (0, 1], got {sigsize_threshold}",
            key="sigsize_threshold", value=sigsize_threshold,
        )
    if max_distance < 0:
        raise ConfigurationError(
            f"Maximum distance must not be negative, got {max_distance}",
            key="max_distance", value=max_distance,
        )


class GroupFinder(ABC):
    """
    Strategy that partitions a product's versions into signature groups.

    Versions whose solo signature is already large enough (see
    :func:`classify_candidates`) always form singleton groups. Strategies only
    decide how the remaining candidates are grouped. No two members of a group
    may be more than ``max_distance`` positions apart from the group's first
    member.
    """

    name: str = "base"

    def __init__(
        self,
        product: Product,
        page_size: Optional[int] = None,
        sigsize_threshold: float = DEFAULT_SIGSIZE_THRESHOLD,
        max_distance: int = DEFAULT_MAX_DISTANCE,
    ):
        validate_grouping_parameters(sigsize_threshold, max_distance)
        self.product = product
        self.page_size = product.page_size if page_size is None else page_size
        self.sigsize_threshold = sigsize_threshold
        self.max_distance = max_distance
        self._assignments: Optional[List[GroupAssignment]] = None

    def find_groups(self) -> List[GroupAssignment]:
        """
        Compute the group configuration.

        Returns:
            One assignment per group, ordered by the canonical position of the
            group's first member

        Raises:
            EmptyInputError: if the product has no versions
        """
        if self._assignments is None:
            if not len(self.product):
                raise EmptyInputError(f"{self.product.name} has no versions to group")

            solo = self.product.generate_signatures(self.page_size)
            split = classify_candidates(solo, self.page_size, self.sigsize_threshold)
            logger.info(
                "%s: %d grouping candidates, %d singletons",
                self.product.name, len(split.candidates), len(split.non_candidates),
            )

            assignments = [
                GroupAssignment(VersionGroup(self.product, [s.primary_version]), s)
                for s in split.non_candidates
            ]
            assignments.extend(self.group_candidates(split.candidates))
            assignments.sort(key=lambda a: a.group.positions[0])
            self._assignments = assignments
        return list(self._assignments)

    @abstractmethod
    def group_candidates(self, candidates: Sequence[Signature]) -> List[GroupAssignment]:
        """
        Partition the candidates.

        Args:
            candidates: Solo signatures of the candidate versions, in
                canonical version order

        Returns:
            Assignments covering every candidate exactly once
        """

    def groups(self) -> List[VersionGroup]:
        return [a.group for a in self.find_groups()]

    def signatures(self) -> List[Signature]:
        return [a.signature for a in self.find_groups()]

    def average_signature_size(self) -> float:
        """Mean signature size over all groups, singletons included."""
        assignments = self.find_groups()
        return sum(a.signature_size for a in assignments) / len(assignments)

    def within_distance(self, seed_position: int, position: int) -> bool:
        return abs(position - seed_position) <= self.max_distance
