"""memsig - memory page signatures for detecting software versions."""

__version__ = "0.1.0"

from .core import (
    ConfigurationError,
    EmptyInputError,
    MemSigError,
    MissingBinaryError,
    Product,
    Signature,
    Version,
    load_product,
)
from .grouping import GroupFinder, VersionGroup, get_group_finder

__all__ = [
    "ConfigurationError",
    "EmptyInputError",
    "GroupFinder",
    "MemSigError",
    "MissingBinaryError",
    "Product",
    "Signature",
    "Version",
    "VersionGroup",
    "__version__",
    "get_group_finder",
    "load_product",
]
