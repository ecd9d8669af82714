"""Grouping strategies for shared signatures."""

from typing import Dict, Optional, Type

from ..core.errors import ConfigurationError
from ..core.product import Product
from .base import (
    DEFAULT_MAX_DISTANCE,
    DEFAULT_SIGSIZE_THRESHOLD,
    CandidateSplit,
    GroupAssignment,
    GroupFinder,
    classify_candidates,
)
from .group import VersionGroup
from .neighbour import NeighbourGroupFinder
from .similarity import SimilarityGroupFinder, rank_by_similarity

STRATEGIES: Dict[str, Type[GroupFinder]] = {
    SimilarityGroupFinder.name: SimilarityGroupFinder,
    NeighbourGroupFinder.name: NeighbourGroupFinder,
}


def get_group_finder(
    name: str,
    product: Product,
    page_size: Optional[int] = None,
    sigsize_threshold: float = DEFAULT_SIGSIZE_THRESHOLD,
    max_distance: int = DEFAULT_MAX_DISTANCE,
) -> GroupFinder:
    """Instantiate the grouping strategy registered under ``name``."""
    try:
        finder_cls = STRATEGIES[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown grouping strategy {name!r}; choose from {', '.join(sorted(STRATEGIES))}",
            key="strategy", value=name,
        ) from None
    return finder_cls(product, page_size, sigsize_threshold, max_distance)


__all__ = [
    "CandidateSplit",
    "GroupAssignment",
    "GroupFinder",
    "NeighbourGroupFinder",
    "STRATEGIES",
    "SimilarityGroupFinder",
    "VersionGroup",
    "classify_candidates",
    "get_group_finder",
    "rank_by_similarity",
]
