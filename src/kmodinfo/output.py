"""Record formatting for tag values."""

from __future__ import annotations

from typing import BinaryIO

from kmodinfo.scanner import TagMatch
from kmodinfo.tags import OutputMode, Shortcut, TagRequest

__all__ = ["TagWriter", "format_record"]


def format_record(name: str, value: bytes, labelled: bool, mode: OutputMode, width: int = 16) -> bytes:
    """Render one record.

    Labelled records start with ``name:`` padded with spaces to ``width``
    bytes; labels already that wide get no padding.
    """
    prefix = b""
    if labelled:
        prefix = f"{name}:".encode("utf-8").ljust(width)
    return prefix + value + mode.terminator


class TagWriter:
    """Writes filename and tag records for one invocation to a binary stream."""

    def __init__(self, stream: BinaryIO, request: TagRequest, mode: OutputMode | None = None, width: int = 16) -> None:
        self._stream = stream
        self._request = request
        self._mode = mode or OutputMode()
        self._width = width

    @property
    def mode(self) -> OutputMode:
        return self._mode

    def write_filename(self, path: str) -> None:
        value = path.encode("utf-8", errors="surrogateescape")
        self._write(Shortcut.FILENAME.value, value)

    def write_match(self, match: TagMatch) -> None:
        self._write(match.name, match.value)

    def _write(self, name: str, value: bytes) -> None:
        record = format_record(name, value, self._request.labelled, self._mode, self._width)
        self._stream.write(record)

    def flush(self) -> None:
        self._stream.flush()
