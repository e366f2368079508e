"""Tag selection types: Shortcut, TagRequest, OutputMode."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from kmodinfo.errors import InvalidInputError

__all__ = ["Shortcut", "TagRequest", "OutputMode"]


class Shortcut(Enum):
    """Well-known tag names. Declaration order is the output order."""

    FILENAME = "filename"
    LICENSE = "license"
    AUTHOR = "author"
    DESCRIPTION = "description"
    VERSION = "version"
    ALIAS = "alias"
    SRCVERSION = "srcversion"
    DEPENDS = "depends"
    UTS_RELEASE = "uts_release"
    VERMAGIC = "vermagic"
    PARM = "parm"
    FIRMWARE = "firmware"


@dataclass(frozen=True)
class TagRequest:
    """Which tags to report for every module of one invocation.

    Attributes:
        shortcuts: Selected well-known tags.
        field: Optional free-form tag name, searched after the shortcuts.
    """

    shortcuts: frozenset[Shortcut] = frozenset(Shortcut)
    field: str | None = None

    def __post_init__(self) -> None:
        if self.field is not None and not self.field:
            raise InvalidInputError(message="Field name must not be empty")
        if not self.shortcuts and self.field is None:
            raise InvalidInputError(message="At least one tag must be requested")

    @classmethod
    def build(cls, shortcuts: Iterable[Shortcut] = (), field: str | None = None) -> TagRequest:
        """Build a request, selecting every shortcut when nothing is chosen."""
        selected = frozenset(shortcuts)
        if not selected and field is None:
            selected = frozenset(Shortcut)
        return cls(shortcuts=selected, field=field)

    @property
    def wants_filename(self) -> bool:
        return Shortcut.FILENAME in self.shortcuts

    @property
    def tag_count(self) -> int:
        return len(self.shortcuts) + (1 if self.field is not None else 0)

    @property
    def labelled(self) -> bool:
        """Values carry a ``name:`` label unless exactly one tag is active."""
        return self.tag_count != 1

    def patterns(self) -> list[str]:
        """Tag names to search for in module content, in output order."""
        names = [s.value for s in Shortcut if s in self.shortcuts and s is not Shortcut.FILENAME]
        if self.field is not None:
            names.append(self.field)
        return names


@dataclass(frozen=True)
class OutputMode:
    """Record terminator written after every value."""

    terminator: bytes = b"\n"

    @classmethod
    def newline(cls) -> OutputMode:
        return cls(b"\n")

    @classmethod
    def nul(cls) -> OutputMode:
        return cls(b"\0")
