"""Read module files, decompressing them when needed."""

from __future__ import annotations

import bz2
import gzip
import logging
import lzma
import zlib
from pathlib import Path
from typing import Callable

import zstandard as zstd

from kmodinfo.errors import ModuleUnreadableError

logger = logging.getLogger(__name__)

__all__ = ["read_module_file", "decompress"]


def _zstd_decompress(data: bytes) -> bytes:
    dctx = zstd.ZstdDecompressor()
    # Frames written in streaming mode carry no content size.
    with dctx.stream_reader(data) as reader:
        return reader.read()


_DECOMPRESSORS: list[tuple[bytes, str, Callable[[bytes], bytes]]] = [
    (b"\x1f\x8b", "gzip", gzip.decompress),
    (b"\xfd7zXZ\x00", "xz", lzma.decompress),
    (b"BZh", "bzip2", bz2.decompress),
    (b"\x28\xb5\x2f\xfd", "zstd", _zstd_decompress),
]

_DECOMPRESS_ERRORS = (OSError, EOFError, ValueError, lzma.LZMAError, zlib.error, zstd.ZstdError)


def decompress(data: bytes, source: str = "<buffer>") -> bytes:
    """Return ``data`` decompressed according to its magic number.

    Content with no recognised magic is returned unchanged.

    Raises:
        ModuleUnreadableError: If compressed content is corrupt.
    """
    for magic, kind, func in _DECOMPRESSORS:
        if data.startswith(magic):
            logger.debug("Decompressing %s as %s", source, kind)
            try:
                return func(data)
            except _DECOMPRESS_ERRORS as e:
                raise ModuleUnreadableError(path=source, reason=f"corrupt {kind} data: {e}", cause=e) from e
    return data


def read_module_file(path: str | Path) -> bytes:
    """Read a possibly-compressed module file into memory.

    Raises:
        OSError: If the file cannot be opened or read.
        ModuleUnreadableError: If the path is unusable or compressed content is corrupt.
    """
    try:
        data = Path(path).read_bytes()
    except ValueError as e:
        # Paths with embedded NUL bytes cannot be opened.
        raise ModuleUnreadableError(path=str(path), reason=str(e), cause=e) from e
    return decompress(data, source=str(path))
