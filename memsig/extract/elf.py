"""
ELF loadable-segment extraction.

The binary is read with pyelftools; every ``PT_LOAD`` segment's file image is
written out zero-padded to a page-size multiple.
"""

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Tuple, Union

from elftools.common.exceptions import ELFError
from elftools.elf.elffile import ELFFile
from elftools.elf.segments import Segment

from ..core.errors import ExtractionError, PartReadError
from ..core.part import pages_needed
from .base import Extractor

logger = logging.getLogger(__name__)

PT_LOAD = "PT_LOAD"


@dataclass(frozen=True)
class ProgramHeader:
    index: int
    type: Union[str, int]
    offset: int
    file_size: int


def _iter_segments(data: bytes, source: str) -> Iterator[Tuple[int, Segment]]:
    """Yield ``(program header index, segment)`` pairs of an ELF image."""
    try:
        elf = ELFFile(io.BytesIO(data))
        for index, segment in enumerate(elf.iter_segments()):
            yield index, segment
    except ELFError as e:
        raise ExtractionError(source, f"invalid ELF file ({e})") from e


def parse_program_headers(data: bytes, source: str = "<bytes>") -> List[ProgramHeader]:
    """Parse the program header table of an ELF image."""
    return [
        ProgramHeader(index, segment["p_type"], segment["p_offset"], segment["p_filesz"])
        for index, segment in _iter_segments(data, source)
    ]


class ELFSegmentExtractor(Extractor):
    """Writes each loadable segment of an ELF binary to ``<index>.seg``."""

    name = "elf"

    def segments(self, binary: Path, page_size: int) -> List[Tuple[str, bytes]]:
        """Return ``(part name, padded bytes)`` for every loadable segment."""
        try:
            data = Path(binary).read_bytes()
        except OSError as e:
            raise PartReadError(binary, str(e)) from e

        segments = []
        for index, segment in _iter_segments(data, str(binary)):
            if segment["p_type"] != PT_LOAD:
                continue
            if segment["p_offset"] + segment["p_filesz"] > len(data):
                raise ExtractionError(binary, f"segment {index} extends past end of file")
            chunk = segment.data()
            padded = chunk.ljust(pages_needed(len(chunk), page_size) * page_size, b"\x00")
            segments.append((f"{index}.seg", padded))
        return segments

    def extract(self, binary: Path, output_dir: Path, page_size: int) -> List[Path]:
        written = []
        for part_name, payload in self.segments(binary, page_size):
            target = Path(output_dir) / part_name
            try:
                target.write_bytes(payload)
            except OSError as e:
                raise PartReadError(target, str(e)) from e
            written.append(target)

        logger.info("Extracted %d loadable segments from %s", len(written), binary)
        return written
