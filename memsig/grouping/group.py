"""A group of versions sharing one signature, and its distance metrics."""

from __future__ import annotations

from itertools import combinations
from typing import Iterable, Iterator, Sequence, Tuple

from ..core.product import Product
from ..core.version import Version


class VersionGroup:
    """
    Sorted, non-empty set of versions of one product.

    Positions are taken from the product's canonical version order once, at
    construction; the metrics below are derived from them.
    """

    def __init__(self, product: Product, versions: Iterable[Version]):
        members = sorted(set(versions))
        if not members:
            raise ValueError("A version group needs at least one version")
        self._product = product
        self._versions: Tuple[Version, ...] = tuple(members)
        self._positions: Tuple[int, ...] = tuple(product.index_of(v) for v in members)

    @property
    def product(self) -> Product:
        return self._product

    @property
    def versions(self) -> Tuple[Version, ...]:
        return self._versions

    @property
    def positions(self) -> Tuple[int, ...]:
        """Canonical indices of the members, ascending."""
        return self._positions

    @property
    def first(self) -> Version:
        return self._versions[0]

    @property
    def last(self) -> Version:
        return self._versions[-1]

    def avg_version_distance(self) -> float:
        """Mean positional distance over all member pairs; 0 for a singleton."""
        if len(self._positions) < 2:
            return 0.0
        distances = [abs(b - a) for a, b in combinations(self._positions, 2)]
        return sum(distances) / len(distances)

    def max_version_distance(self) -> int:
        """Positional distance between the first and the last member."""
        return self._positions[-1] - self._positions[0]

    def skipped_version_count(self) -> int:
        """Versions positioned between first and last member that are not members."""
        low, high = self._positions[0], self._positions[-1]
        members = set(self._positions)
        return sum(1 for i in range(low + 1, high) if i not in members)

    def version_strings(self) -> Sequence[str]:
        return [v.version_string for v in self._versions]

    def __contains__(self, version: object) -> bool:
        return version in self._versions

    def __iter__(self) -> Iterator[Version]:
        return iter(self._versions)

    def __len__(self) -> int:
        return len(self._versions)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionGroup):
            return NotImplemented
        return self._versions == other._versions

    def __hash__(self) -> int:
        return hash(self._versions)

    def __repr__(self) -> str:
        return f"VersionGroup({', '.join(self.version_strings())})"
