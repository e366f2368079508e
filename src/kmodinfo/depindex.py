"""Dependency index (modules.dep) reading and module name normalization."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import IO, Iterator

from kmodinfo.config import ModinfoSettings
from kmodinfo.errors import IndexUnavailableError

logger = logging.getLogger(__name__)

__all__ = [
    "DependencyRecord",
    "filename_to_modname",
    "iter_index_lines",
    "parse_dependency_line",
    "read_dependency_index",
    "index_candidates",
    "open_dependency_index",
]

_DELIMITERS = " \t"
_COMMENT = "#"


@dataclass(frozen=True)
class DependencyRecord:
    """One ``<path>: <deps...>`` line of the dependency index."""

    path: str
    name: str
    dependencies: tuple[str, ...] = ()


def filename_to_modname(filename: str) -> str:
    """Derive the module name used for pattern matching.

    ``foo-bar.ko.gz`` becomes ``foo_bar``: everything from the first dot
    is dropped and dashes become underscores.
    """
    base = os.path.basename(filename)
    stem = base.split(".", 1)[0]
    return stem.replace("-", "_")


def iter_index_lines(stream: IO[str]) -> Iterator[list[str]]:
    """Yield the tokens of each non-empty, non-comment line."""
    for raw in stream:
        line = raw.split(_COMMENT, 1)[0]
        tokens = line.replace("\t", " ").split()
        if tokens:
            yield tokens


def parse_dependency_line(tokens: list[str]) -> DependencyRecord | None:
    """Build a record from a tokenized line; lines without ``path:`` give None."""
    head = tokens[0]
    if not head.endswith(":"):
        return None
    path = head[:-1]
    return DependencyRecord(path=path, name=filename_to_modname(path), dependencies=tuple(tokens[1:]))


def read_dependency_index(stream: IO[str]) -> Iterator[DependencyRecord]:
    for tokens in iter_index_lines(stream):
        record = parse_dependency_line(tokens)
        if record is not None:
            yield record


def index_candidates(settings: ModinfoSettings, release: str) -> list[str]:
    """Index file locations to try, most specific first."""
    candidates = [os.path.join(settings.modules_dir, release, settings.depmod_file)]
    if settings.flat_layout:
        candidates.append(os.path.join(settings.modules_dir, settings.depmod_file))
    return candidates


def open_dependency_index(settings: ModinfoSettings, release: str) -> tuple[str, list[DependencyRecord]]:
    """Read the first dependency index that can be opened.

    Returns:
        The index path and its records.

    Raises:
        IndexUnavailableError: If no candidate could be opened.
    """
    attempted = index_candidates(settings, release)
    last_error: OSError | None = None
    for path in attempted:
        try:
            with open(path, encoding="utf-8", errors="surrogateescape") as stream:
                records = list(read_dependency_index(stream))
        except OSError as e:
            logger.debug("Cannot open dependency index %s: %s", path, e)
            last_error = e
            continue
        logger.debug("Read %d record(s) from %s", len(records), path)
        return path, records
    raise IndexUnavailableError(attempted=attempted, cause=last_error)
