"""Module resolution: map names and paths to module images and report their tags."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from typing import IO, BinaryIO, Iterable

from kmodinfo.config import ModinfoSettings
from kmodinfo.depindex import DependencyRecord, open_dependency_index
from kmodinfo.errors import IndexUnavailableError, ModuleUnreadableError
from kmodinfo.output import TagWriter
from kmodinfo.reader import read_module_file
from kmodinfo.scanner import TagMatch, scan_request
from kmodinfo.tags import OutputMode, TagRequest
from kmodinfo.utils.pattern import match_pattern

logger = logging.getLogger(__name__)

__all__ = ["ModuleResult", "ModuleResolver", "candidate_paths", "resolve_and_scan"]


@dataclass(frozen=True)
class ModuleResult:
    """Outcome of inspecting one module specifier."""

    path: str
    resolved_path: str | None = None
    matches: list[TagMatch] = field(default_factory=list)
    error: ModuleUnreadableError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def candidate_paths(specifier: str, release: str, settings: ModinfoSettings) -> list[str]:
    """Paths to try for ``specifier``, in priority order.

    Absolute paths are only tried as given. Relative paths, as stored in
    the dependency index, are also looked up in the release tree and,
    with ``flat_layout``, directly under the modules directory.
    """
    candidates = [specifier]
    if not os.path.isabs(specifier):
        candidates.append(os.path.join(settings.modules_dir, release, specifier))
        if settings.flat_layout:
            candidates.append(os.path.join(settings.modules_dir, specifier))
    return list(dict.fromkeys(candidates))


class ModuleResolver:
    """Resolves module specifiers and writes the requested tags of each match."""

    def __init__(
        self,
        request: TagRequest,
        writer: TagWriter,
        release: str,
        settings: ModinfoSettings | None = None,
        errors: IO[str] | None = None,
    ) -> None:
        self._request = request
        self._writer = writer
        self._release = release
        self._settings = settings or ModinfoSettings()
        self._errors = errors if errors is not None else sys.stderr

    def inspect(self, path: str, release: str | None = None) -> ModuleResult:
        """Read one module and write its filename and tag records.

        The module buffer lives only for the duration of this call.
        Unreadable modules are reported and returned as a failed result.
        """
        if release is None:
            release = self._release
        if self._request.wants_filename:
            self._writer.write_filename(path)

        attempted = candidate_paths(path, release, self._settings)
        reason = "No such file or directory"
        for candidate in attempted:
            try:
                buffer = read_module_file(candidate)
            except OSError as e:
                logger.debug("Cannot read %s: %s", candidate, e)
                reason = e.strerror or str(e)
                continue
            except ModuleUnreadableError as e:
                logger.debug("Cannot decode %s: %s", candidate, e.reason)
                reason = e.reason
                continue
            matches = scan_request(buffer, self._request)
            del buffer
            for match in matches:
                self._writer.write_match(match)
            return ModuleResult(path=path, resolved_path=candidate, matches=matches)

        error = ModuleUnreadableError(path=path, reason=reason, attempted=attempted)
        self._report(error)
        return ModuleResult(path=path, error=error)

    def run(self, specifiers: Iterable[str]) -> list[ModuleResult]:
        """Inspect every index record matching a pattern, then the leftovers.

        Each pattern is a shell glob applied to normalized module names.
        Patterns that matched nothing in the index are treated as literal
        paths afterwards.
        """
        patterns = list(specifiers)
        consumed = [False] * len(patterns)
        release = self._release
        results: list[ModuleResult] = []

        records: list[DependencyRecord] = []
        try:
            index_path, records = open_dependency_index(self._settings, release)
        except IndexUnavailableError as e:
            logger.info("%s; resolving arguments as paths only", e.message)
            if self._settings.flat_layout:
                release = ""
        else:
            logger.debug("Using dependency index %s", index_path)

        for record in records:
            hit = False
            for i, pattern in enumerate(patterns):
                if match_pattern(pattern, record.name):
                    consumed[i] = True
                    hit = True
            if hit:
                results.append(self.inspect(record.path, release))

        for pattern, done in zip(patterns, consumed):
            if not done and pattern:
                results.append(self.inspect(pattern, release))

        self._writer.flush()
        return results

    def _report(self, error: ModuleUnreadableError) -> None:
        logger.debug("Module unreadable: %s (tried %s)", error.path, ", ".join(error.attempted))
        self._writer.flush()
        self._errors.write(f"modinfo: {error.path}: {error.reason}\n")
        self._errors.flush()


def resolve_and_scan(
    specifiers: Iterable[str],
    kernel_release: str,
    request: TagRequest,
    settings: ModinfoSettings | None = None,
    mode: OutputMode | None = None,
    stream: BinaryIO | None = None,
    errors: IO[str] | None = None,
) -> list[ModuleResult]:
    """Resolve ``specifiers`` and print the requested tags of every match."""
    settings = settings or ModinfoSettings()
    if stream is None:
        stream = sys.stdout.buffer
    writer = TagWriter(stream, request, mode, width=settings.label_width)
    resolver = ModuleResolver(request, writer, kernel_release, settings=settings, errors=errors)
    return resolver.run(specifiers)
