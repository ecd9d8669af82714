"""Memory page model."""

from __future__ import annotations

from functools import cached_property
from typing import TYPE_CHECKING, Tuple

if TYPE_CHECKING:
    from .part import Part


ALL_ONES_BYTE = 0xFF


class Page:
    """
    A page-sized window into a :class:`Part`.

    Pages are created on demand by their part and never mutated. Two notions
    of equality exist and are kept apart on purpose:

    * identity (``identity_equals``, ``==`` and ``hash``): same part, same
      offset, same length. Used for set and dict membership.
    * content (``content_equals``): byte-wise comparison of the page data.
    """

    def __init__(self, data: bytes, part: Part, offset: int):
        self._data = bytes(data)
        self._part = part
        self._offset = offset

    @property
    def data(self) -> bytes:
        """Page contents, padded to the page size."""
        return self._data

    @property
    def part(self) -> Part:
        return self._part

    @property
    def offset(self) -> int:
        """Byte offset of the page within its part."""
        return self._offset

    @property
    def size(self) -> int:
        return len(self._data)

    @property
    def page_number(self) -> int:
        """Index of the page within its part."""
        return self._offset // len(self._data)

    @property
    def identity_key(self) -> Tuple:
        return (self._part.identity_key, self._offset, len(self._data))

    @cached_property
    def is_all_zero(self) -> bool:
        """True if every byte of the page is 0x00."""
        return self._data.count(0) == len(self._data)

    @cached_property
    def is_all_one(self) -> bool:
        """True if every bit of the page is set."""
        return self._data.count(ALL_ONES_BYTE) == len(self._data)

    @property
    def is_special(self) -> bool:
        """All-zero and all-one pages are too common to be diagnostic."""
        return self.is_all_zero or self.is_all_one

    def content_equals(self, other: Page) -> bool:
        return self._data == other._data

    def identity_equals(self, other: Page) -> bool:
        return self.identity_key == other.identity_key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Page):
            return NotImplemented
        return self.identity_equals(other)

    def __hash__(self) -> int:
        return hash(self.identity_key)

    def __repr__(self) -> str:
        return f"Page(part={self._part.name!r}, offset={self._offset}, size={self.size})"
