"""
Greedy grouping by similarity to the group seed.

The lowest remaining candidate seeds a group. The other candidates are
ranked by how many of the seed's pages they share and tried in that order.
Every tentative addition regenerates the group signature; the largest (or
equally large, later) configuration seen wins. The walk stops as soon as a
candidate shares fewer pages than the best signature holds, since no group
containing it can keep that many pages.

This does not explore every possible configuration, but it is a reasonable
trade-off between signature size and run time.
"""

import logging
from typing import List, Sequence, Tuple

from ..core.signature import Signature
from ..core.version import Version
from .base import GroupAssignment, GroupFinder
from .group import VersionGroup

logger = logging.getLogger(__name__)


def rank_by_similarity(
    seed: Version,
    others: Sequence[Version],
    page_size: int,
) -> List[Tuple[Version, int]]:
    """
    Pair every version with the number of seed pages it shares.

    Sorted by descending match count; ties keep the input order.
    """
    scored = [(other, seed.compare_to(other, page_size).matches) for other in others]
    return sorted(scored, key=lambda item: -item[1])


class SimilarityGroupFinder(GroupFinder):
    """Groups each seed with its most similar candidates."""

    name = "similarity"

    def group_candidates(self, candidates: Sequence[Signature]) -> List[GroupAssignment]:
        remaining = list(candidates)
        assignments: List[GroupAssignment] = []

        while remaining:
            seed_signature = remaining[0]
            seed = seed_signature.primary_version
            seed_position = self.product.index_of(seed)

            best_signature = seed_signature
            best_members = [seed]
            working = [seed]

            ranked = rank_by_similarity(
                seed, [s.primary_version for s in remaining[1:]], self.page_size
            )
            for candidate, matches in ranked:
                if not self.within_distance(seed_position, self.product.index_of(candidate)):
                    continue
                if matches < best_signature.number_of_pages():
                    break

                working.append(candidate)
                signature = self.product.generate_signature(working, self.page_size)
                if signature.number_of_pages() >= best_signature.number_of_pages():
                    best_signature = signature
                    best_members = list(working)

            logger.debug(
                "Group seeded by %s: %s (%d pages)",
                seed, ", ".join(str(v) for v in best_members), best_signature.number_of_pages(),
            )
            assignments.append(
                GroupAssignment(VersionGroup(self.product, best_members), best_signature)
            )
            chosen = set(best_members)
            remaining = [s for s in remaining if s.primary_version not in chosen]

        return assignments
