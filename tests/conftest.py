"""Shared fixtures: small in-memory products and on-disk software trees."""

from pathlib import Path
from typing import Dict, List

import pytest

from memsig.core.product import Product
from memsig.core.version import Version

PS = 16


def page(n: int, page_size: int = PS) -> bytes:
    """Deterministic page content; ``page(0)`` is all zero."""
    return n.to_bytes(2, "big") * (page_size // 2)


def make_version(version_string: str, *page_ids: int, part: str = "0.seg") -> Version:
    return Version(version_string, {part: b"".join(page(i) for i in page_ids)}, page_size=PS)


def make_product(layout: Dict[str, List[int]], name: str = "demo") -> Product:
    return Product(name, "bin", PS, [make_version(v, *ids) for v, ids in layout.items()])


def write_tree(swpath: Path, layout: Dict[str, List[int]], page_size: int = PS) -> Path:
    """Create ``swpath/versions/<v>/parts-<ps>/0.seg`` for every version."""
    for version_string, ids in layout.items():
        parts_dir = swpath / "versions" / version_string / f"parts-{page_size}"
        parts_dir.mkdir(parents=True)
        (parts_dir / "0.seg").write_bytes(b"".join(page(i, page_size) for i in ids))
    return swpath


# 1.0, 1.1 and 1.2 share pages 1-3 and differ in one page each; 2.0 is unrelated.
FAMILY = {
    "1.0": [1, 2, 3, 10],
    "1.1": [1, 2, 3, 11],
    "1.2": [1, 2, 3, 12],
    "2.0": [20, 21, 22, 23],
}

# 1.0 and 1.1 share page 1 only with each other; pages 5 and 6 also occur in 2.0.
PAIR = {
    "1.0": [1, 10, 5, 6],
    "1.1": [1, 11, 5, 6],
    "2.0": [5, 6, 20, 21],
}


@pytest.fixture
def family_product():
    return make_product(FAMILY)


@pytest.fixture
def pair_product():
    return make_product(PAIR)


@pytest.fixture
def sw_tree(tmp_path):
    return write_tree(tmp_path / "demo", {"1.0": [1, 2, 3], "1.1": [1, 2, 4], "1.2": [1, 5, 0]})
