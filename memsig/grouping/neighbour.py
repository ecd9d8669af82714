"""Greedy grouping of adjacent versions."""

import logging
from typing import List, Sequence

from ..core.signature import Signature
from .base import GroupAssignment, GroupFinder
from .group import VersionGroup

logger = logging.getLogger(__name__)


class NeighbourGroupFinder(GroupFinder):
    """
    Grows each group along the canonical version order.

    Starting at the lowest remaining candidate, the following candidates are
    added one at a time while they are within ``max_distance``. A larger or
    equal signature is adopted; the first addition that shrinks the
    signature ends the group.
    """

    name = "neighbour"

    def group_candidates(self, candidates: Sequence[Signature]) -> List[GroupAssignment]:
        remaining = list(candidates)
        assignments: List[GroupAssignment] = []

        while remaining:
            seed_signature = remaining[0]
            seed = seed_signature.primary_version
            seed_position = self.product.index_of(seed)

            best_signature = seed_signature
            best_members = [seed]

            for next_signature in remaining[1:]:
                candidate = next_signature.primary_version
                if not self.within_distance(seed_position, self.product.index_of(candidate)):
                    break
                members = best_members + [candidate]
                signature = self.product.generate_signature(members, self.page_size)
                if signature.number_of_pages() < best_signature.number_of_pages():
                    break
                best_signature = signature
                best_members = members

            logger.debug("Neighbour group from %s: %d members", seed, len(best_members))
            assignments.append(
                GroupAssignment(VersionGroup(self.product, best_members), best_signature)
            )
            chosen = set(best_members)
            remaining = [s for s in remaining if s.primary_version not in chosen]

        return assignments
