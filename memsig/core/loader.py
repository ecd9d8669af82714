"""Loading products and versions from the filesystem.

Expected layout for a product rooted at ``swpath``::

    swpath/versions/<version>/<binary>
    swpath/versions/<version>/parts-<page size>/<part files>

The ``parts-<page size>`` directory is a cache filled by an extractor the
first time a version is loaded. It is never invalidated; delete it to force
re-extraction.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from ..extract.base import Extractor
from ..utils.files import staging_directory
from .errors import ConfigurationError, EmptyInputError, MissingBinaryError, PartReadError
from .product import Product
from .version import DEFAULT_PAGE_SIZE, Version

logger = logging.getLogger(__name__)

VERSIONS_DIR = "versions"


def parts_dir_name(page_size: int) -> str:
    return f"parts-{page_size}"


def validate_page_size(page_size: int) -> int:
    """Page sizes must be positive powers of two."""
    if not isinstance(page_size, int) or isinstance(page_size, bool):
        raise ConfigurationError(f"Page size must be an integer, got {page_size!r}",
                                 key="page_size", value=page_size)
    if page_size <= 0 or page_size & (page_size - 1):
        raise ConfigurationError(f"Page size must be a positive power of two, got {page_size}",
                                 key="page_size", value=page_size)
    return page_size


def collect_version_dirs(versions_path: Path) -> List[Path]:
    """List version directories, sorted by name for reproducible logging."""
    if not versions_path.is_dir():
        raise ConfigurationError(f"Versions directory does not exist: {versions_path}",
                                 key="swpath", value=str(versions_path))
    return sorted(p for p in versions_path.iterdir() if p.is_dir())


def ensure_parts(
    version_dir: Path,
    binary_name: str,
    page_size: int,
    extractor: Optional[Extractor] = None,
) -> Path:
    """
    Return the part cache directory of a version, extracting it if absent.

    Extraction runs into a staging directory that is only renamed to its
    final name when the extractor finished without error.

    Raises:
        MissingBinaryError: if the cache is absent and so is the binary
        ConfigurationError: if the cache is absent and no extractor was given
    """
    parts_dir = version_dir / parts_dir_name(page_size)
    if parts_dir.is_dir():
        return parts_dir

    binary = version_dir / binary_name
    if not binary_name or not binary.is_file():
        raise MissingBinaryError(binary, version=version_dir.name)
    if extractor is None:
        raise ConfigurationError(
            f"No part cache at {parts_dir} and no extractor configured",
            key="extractor",
        )

    logger.info("Extracting parts of %s into %s", binary, parts_dir)
    with staging_directory(parts_dir) as staging:
        extractor.extract(binary, staging, page_size)
    return parts_dir


def read_parts(parts_dir: Path) -> List[Tuple[str, bytes]]:
    """
    Read every part file of a cache directory.

    Dotfiles are skipped. Any other entry that is not a readable regular file
    aborts loading; a version with a missing part would corrupt every
    comparison it takes part in.
    """
    try:
        entries = sorted(parts_dir.iterdir())
    except OSError as e:
        raise PartReadError(parts_dir, str(e)) from e

    parts = []
    for part_file in entries:
        if part_file.name.startswith("."):
            continue
        if not part_file.is_file():
            raise PartReadError(part_file, "not a regular file")
        try:
            parts.append((part_file.name, part_file.read_bytes()))
        except OSError as e:
            raise PartReadError(part_file, str(e)) from e
    return parts


def load_version(
    version_dir: Path,
    binary_name: str,
    page_size: int = DEFAULT_PAGE_SIZE,
    extractor: Optional[Extractor] = None,
) -> Version:
    """Build a :class:`Version` from its directory."""
    parts_dir = ensure_parts(version_dir, binary_name, page_size, extractor)
    parts = read_parts(parts_dir)
    logger.debug("Loaded %d parts for version %s", len(parts), version_dir.name)
    return Version(version_dir.name, parts, page_size=page_size, path=version_dir)


def load_product(
    name: str,
    swpath: Path,
    binary_name: str,
    page_size: int = DEFAULT_PAGE_SIZE,
    extractor: Optional[Extractor] = None,
    versions_dir: str = VERSIONS_DIR,
) -> Product:
    """
    Load all versions of a product.

    Args:
        name: Product name
        swpath: Product root directory
        binary_name: File name of the binary inside each version directory
        page_size: Page size in bytes
        extractor: Used to fill missing part caches
        versions_dir: Name of the subdirectory holding the version directories

    Returns:
        Product with every version loaded

    Raises:
        ConfigurationError: for an invalid page size or a missing directory
        EmptyInputError: if no version directories exist
    """
    validate_page_size(page_size)
    swpath = Path(swpath)
    if not swpath.is_dir():
        raise ConfigurationError(f"Software path does not exist: {swpath}",
                                 key="swpath", value=str(swpath))

    version_dirs = collect_version_dirs(swpath / versions_dir)
    if not version_dirs:
        raise EmptyInputError(
            f"No versions found in {swpath / versions_dir}",
            details={"swpath": str(swpath)},
        )

    logger.info("Loading %d versions of %s from %s", len(version_dirs), name, swpath)
    product = Product(name, binary_name, page_size)
    for version_dir in version_dirs:
        version = load_version(version_dir, binary_name, page_size, extractor)
        try:
            product.add_version(version)
        except ValueError as e:
            raise ConfigurationError(str(e), key="version", value=version_dir.name) from e
    return product
