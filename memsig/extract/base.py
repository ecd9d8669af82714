"""Extractor interface: split a binary into part files."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List


class Extractor(ABC):
    """
    Splits an executable into page-aligned part files.

    Implementations write one file per part into ``output_dir`` and return the
    written paths. The file name is the part name.
    """

    name: str = "base"

    @abstractmethod
    def extract(self, binary: Path, output_dir: Path, page_size: int) -> List[Path]:
        """
        Extract all parts of ``binary``.

        Args:
            binary: Path to the executable
            output_dir: Existing directory to write part files into
            page_size: Page size used for padding

        Returns:
            Paths of the written part files
        """
