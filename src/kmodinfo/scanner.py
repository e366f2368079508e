"""Tag scanner for ``name=value`` records embedded in module images.

Module images keep their metadata as NUL-terminated ``name=value``
strings. Each record is preceded by a boundary byte whose low 7 bits
are zero (0x00 or 0x80). Occurrences of ``name=`` that are not preceded
by such a byte are incidental matches inside unrelated data and are
skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator

from kmodinfo.tags import TagRequest

logger = logging.getLogger(__name__)

__all__ = ["TagMatch", "scan", "scan_tag", "scan_request"]

_BOUNDARY_MASK = 0x7F


@dataclass(frozen=True)
class TagMatch:
    """One tag value found in a module image."""

    name: str
    value: bytes

    @property
    def text(self) -> str:
        return self.value.decode("utf-8", errors="replace")


def scan_tag(buffer: bytes, name: str) -> Iterator[bytes]:
    """Yield every value recorded under ``name``, in buffer order.

    A candidate at position 0 is never a tag since it has no boundary byte.
    A value without a terminating NUL runs to the end of the buffer.
    """
    view = memoryview(buffer)
    needle = name.encode("utf-8") + b"="
    cursor = 0
    while True:
        start = buffer.find(needle, cursor)
        if start < 0:
            return
        if start == 0 or view[start - 1] & _BOUNDARY_MASK:
            cursor = start + 1
            continue
        value_start = start + len(needle)
        end = buffer.find(b"\0", value_start)
        if end < 0:
            end = len(buffer)
        yield bytes(view[value_start:end])
        cursor = end + 1


def scan(buffer: bytes, patterns: Iterable[str]) -> Iterator[TagMatch]:
    """Scan ``buffer`` for each pattern in turn.

    Output is grouped by pattern in the order given, and by buffer
    position within a pattern. Missing tags produce nothing.
    """
    for name in patterns:
        for value in scan_tag(buffer, name):
            yield TagMatch(name=name, value=value)


def scan_request(buffer: bytes, request: TagRequest) -> list[TagMatch]:
    """Collect all matches for the tags selected in ``request``."""
    matches = list(scan(buffer, request.patterns()))
    logger.debug("Found %d tag value(s) in %d byte buffer", len(matches), len(buffer))
    return matches
