"""Binary part extraction."""

from .base import Extractor
from .elf import ELFSegmentExtractor, parse_program_headers

__all__ = ["Extractor", "ELFSegmentExtractor", "parse_program_headers"]
