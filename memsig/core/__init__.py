"""Data model and signature engine."""

from .errors import (
    ConfigurationError,
    EmptyInputError,
    ExtractionError,
    MemSigError,
    MissingBinaryError,
    PartReadError,
)
from .version_key import VersionKey
from .page import Page
from .part import Part
from .comparison import ComparisonMatrix, ComparisonResult
from .version import DEFAULT_PAGE_SIZE, UsablePages, Version
from .signature import Signature
from .product import Product
from .loader import load_product, load_version

__all__ = [
    "ComparisonMatrix",
    "ComparisonResult",
    "ConfigurationError",
    "DEFAULT_PAGE_SIZE",
    "EmptyInputError",
    "ExtractionError",
    "MemSigError",
    "MissingBinaryError",
    "Page",
    "Part",
    "PartReadError",
    "Product",
    "Signature",
    "UsablePages",
    "Version",
    "VersionKey",
    "load_product",
    "load_version",
]
