"""Tests for version groups and the grouping strategies."""

import pytest

from conftest import FAMILY, make_product
from memsig.core.errors import ConfigurationError, EmptyInputError
from memsig.core.product import Product
from memsig.grouping import (
    NeighbourGroupFinder,
    SimilarityGroupFinder,
    VersionGroup,
    classify_candidates,
    get_group_finder,
    rank_by_similarity,
)


def members(finder):
    return [g.version_strings() for g in finder.groups()]


def covered(finder):
    return sorted(v for g in finder.groups() for v in g)


class TestVersionGroup:
    """Test distance metrics of a group."""

    @pytest.fixture
    def product(self):
        return make_product({f"1.{i}": [i + 1] for i in range(5)})

    def test_metrics(self, product):
        v = product.versions
        group = VersionGroup(product, [v[4], v[0], v[2]])
        assert group.version_strings() == ["1.0", "1.2", "1.4"]
        assert group.positions == (0, 2, 4)
        assert group.avg_version_distance() == pytest.approx(8 / 3)
        assert group.max_version_distance() == 4
        assert group.skipped_version_count() == 2
        assert group.first is v[0]
        assert group.last is v[4]

    def test_singleton(self, product):
        group = VersionGroup(product, [product.versions[3]])
        assert group.avg_version_distance() == 0.0
        assert group.max_version_distance() == 0
        assert group.skipped_version_count() == 0
        assert len(group) == 1

    def test_contiguous_group_skips_nothing(self, product):
        group = VersionGroup(product, product.versions[1:4])
        assert group.skipped_version_count() == 0
        assert group.avg_version_distance() == pytest.approx(4 / 3)

    def test_empty_group(self, product):
        with pytest.raises(ValueError):
            VersionGroup(product, [])

    def test_equality(self, product):
        v = product.versions
        assert VersionGroup(product, [v[0], v[1]]) == VersionGroup(product, [v[1], v[0]])
        assert v[1] in VersionGroup(product, [v[0], v[1]])


class TestClassifyCandidates:

    def test_split(self, family_product):
        solo = family_product.generate_signatures()
        split = classify_candidates(solo, 16, 0.5)
        assert [s.label() for s in split.candidates] == ["1.0", "1.1", "1.2"]
        assert [s.label() for s in split.non_candidates] == ["2.0"]

    def test_low_threshold_keeps_everyone_alone(self, family_product):
        solo = family_product.generate_signatures()
        split = classify_candidates(solo, 16, 0.25)
        assert split.candidates == []
        assert len(split.non_candidates) == 4

    def test_complete_signature_is_never_a_candidate(self, family_product):
        """
        A threshold of 1.0 does not make every version a singleton.

        A version stays alone when ``sigSize >= pages * threshold``, so at 1.0
        only a version whose signature keeps every one of its pages is held
        back. Versions with any shared page remain grouping candidates.
        """
        solo = family_product.generate_signatures()
        split = classify_candidates(solo, 16, 1.0)
        assert [s.label() for s in split.non_candidates] == ["2.0"]


class TestRankBySimilarity:

    def test_sorted_by_matches_stable(self):
        product = make_product({"1.0": [1, 2, 3], "1.1": [1], "1.2": [1, 2], "1.3": [3, 9], "1.4": [7]})
        seed, *others = product.versions
        ranked = rank_by_similarity(seed, others, 16)
        assert [(str(v), m) for v, m in ranked] == [("1.2", 2), ("1.1", 1), ("1.3", 1), ("1.4", 0)]


class TestSimilarityGroupFinder:
    """Test the greedy similarity strategy."""

    def test_groups_similar_versions(self, family_product):
        finder = SimilarityGroupFinder(family_product, sigsize_threshold=0.5, max_distance=5)
        assert members(finder) == [["1.0", "1.1", "1.2"], ["2.0"]]
        assert [s.number_of_pages() for s in finder.signatures()] == [3, 4]
        assert finder.average_signature_size() == pytest.approx(3.5)

    def test_group_signature_counters(self, family_product):
        finder = SimilarityGroupFinder(family_product)
        group_sig = finder.signatures()[0]
        assert group_sig.not_matching_in_group_count == 1
        assert group_sig.other_version_duplicate_count == 0
        assert group_sig.label() == "1.0+1.1+1.2"

    def test_zero_distance_never_groups(self, family_product):
        finder = SimilarityGroupFinder(family_product, max_distance=0)
        assert members(finder) == [["1.0"], ["1.1"], ["1.2"], ["2.0"]]
        assert [s.number_of_pages() for s in finder.signatures()] == [1, 1, 1, 4]

    def test_distance_limit_skips_far_candidates(self, family_product):
        finder = SimilarityGroupFinder(family_product, max_distance=1)
        assert all(len(g) == 1 for g in finder.groups())

    def test_low_threshold_never_groups(self, family_product):
        finder = SimilarityGroupFinder(family_product, sigsize_threshold=0.25)
        assert all(len(g) == 1 for g in finder.groups())

    def test_equal_size_group_is_preferred(self):
        # 1.0+1.1 keeps one page, as many as either solo signature
        product = make_product({"1.0": [1, 10, 5, 6], "1.1": [1, 11, 5, 6], "2.0": [5, 6, 20, 21]})
        finder = SimilarityGroupFinder(product)
        assert members(finder) == [["1.0", "1.1"], ["2.0"]]
        assert finder.signatures()[0].number_of_pages() == 1

    def test_every_version_covered_once(self, family_product):
        for max_distance in (0, 1, 2, 5):
            finder = SimilarityGroupFinder(family_product, max_distance=max_distance)
            assert covered(finder) == list(family_product.versions)

    def test_results_cached(self, family_product):
        finder = SimilarityGroupFinder(family_product)
        first = finder.find_groups()
        assert finder.find_groups() == first
        assert finder.find_groups() is not first

    def test_assignments_are_hashable(self, family_product):
        assignments = SimilarityGroupFinder(family_product).find_groups()
        assert len(set(assignments)) == len(assignments)

    def test_empty_product(self):
        with pytest.raises(EmptyInputError):
            SimilarityGroupFinder(Product("empty", "bin", 16)).find_groups()


class TestNeighbourGroupFinder:

    def test_stops_when_signature_shrinks(self, family_product):
        finder = NeighbourGroupFinder(family_product)
        assert members(finder) == [["1.0"], ["1.1"], ["1.2"], ["2.0"]]

    def test_extends_with_next_version(self):
        product = make_product({"1.0": [1, 10, 5, 6], "1.1": [1, 11, 5, 6], "2.0": [5, 6, 20, 21]})
        finder = NeighbourGroupFinder(product)
        assert members(finder) == [["1.0", "1.1"], ["2.0"]]

    def test_zero_distance(self):
        product = make_product({"1.0": [1, 10, 5, 6], "1.1": [1, 11, 5, 6], "2.0": [5, 6, 20, 21]})
        finder = NeighbourGroupFinder(product, max_distance=0)
        assert members(finder) == [["1.0"], ["1.1"], ["2.0"]]


class TestGroupFinderParameters:

    @pytest.mark.parametrize("threshold", [0, -0.5, 1.5])
    def test_threshold_range(self, family_product, threshold):
        with pytest.raises(ConfigurationError):
            SimilarityGroupFinder(family_product, sigsize_threshold=threshold)

    def test_negative_distance(self, family_product):
        with pytest.raises(ConfigurationError):
            NeighbourGroupFinder(family_product, max_distance=-1)

    def test_registry(self, family_product):
        assert isinstance(get_group_finder("similarity", family_product), SimilarityGroupFinder)
        assert isinstance(get_group_finder("neighbour", family_product), NeighbourGroupFinder)
        with pytest.raises(ConfigurationError):
            get_group_finder("random", family_product)

    def test_page_size_defaults_to_product(self):
        product = make_product(FAMILY)
        assert SimilarityGroupFinder(product).page_size == 16
