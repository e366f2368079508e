"""modinfo command line interface."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import BinaryIO, TextIO

from kmodinfo.config import load_settings
from kmodinfo.errors import InvalidInputError, ModinfoError
from kmodinfo.resolver import resolve_and_scan
from kmodinfo.tags import OutputMode, Shortcut, TagRequest

logger = logging.getLogger(__name__)

__all__ = ["build_parser", "parse_args", "main"]

# (short flag, long flag, shortcut)
_SHORTCUT_FLAGS: list[tuple[str | None, str, Shortcut]] = [
    ("-n", "--filename", Shortcut.FILENAME),
    ("-l", "--license", Shortcut.LICENSE),
    ("-a", "--author", Shortcut.AUTHOR),
    ("-d", "--description", Shortcut.DESCRIPTION),
    ("-v", "--version", Shortcut.VERSION),
    ("-A", "--alias", Shortcut.ALIAS),
    ("-s", "--srcversion", Shortcut.SRCVERSION),
    ("-D", "--depends", Shortcut.DEPENDS),
    ("-u", "--uts-release", Shortcut.UTS_RELEASE),
    ("-m", "--vermagic", Shortcut.VERMAGIC),
    ("-p", "--parm", Shortcut.PARM),
    (None, "--firmware", Shortcut.FIRMWARE),
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="modinfo",
        description="Show information about Linux kernel modules.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  modinfo loop                    # All known tags of the 'loop' module
  modinfo -F vermagic loop        # A single tag, unlabelled
  modinfo -l -a 'snd_*'           # License and author of matching modules
  modinfo -0 -D ./foo.ko | xargs -0 echo
        """,
    )

    parser.add_argument(
        "modules",
        nargs="+",
        metavar="MODULE",
        help="Module name glob (matched against normalized names in modules.dep, e.g. 'snd_*') or module file path",
    )

    for short, long, shortcut in _SHORTCUT_FLAGS:
        flags = [f for f in (short, long) if f]
        parser.add_argument(
            *flags,
            dest="shortcuts",
            action="append_const",
            const=shortcut,
            help=f"Shortcut for '-F {shortcut.value}'",
        )

    parser.add_argument(
        "-F", "--field",
        default=None,
        metavar="KEYWORD",
        help="Keyword to look for",
    )

    parser.add_argument(
        "-0", "--null",
        action="store_true",
        help="Separate output with NULs",
    )

    parser.add_argument(
        "-k", "--set-version",
        dest="release",
        default=None,
        metavar="RELEASE",
        help="Kernel release to look up modules for (default: running kernel)",
    )

    parser.add_argument(
        "-b", "--basedir",
        default=None,
        metavar="DIR",
        help="Base directory of the module trees (default: /lib/modules)",
    )

    parser.add_argument(
        "--config",
        default=None,
        metavar="FILE",
        help="YAML settings file (default: $KMODINFO_CONFIG)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log resolution details to stderr",
    )

    return parser


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    return build_parser().parse_args(args)


def main(
    args: list[str] | None = None,
    stdout: BinaryIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Main entry point."""
    parsed = parse_args(args)
    errors = stderr if stderr is not None else sys.stderr

    logging.basicConfig(
        level=logging.DEBUG if parsed.debug else logging.WARNING,
        stream=errors,
        format="%(name)s: %(levelname)s: %(message)s",
    )

    try:
        settings = load_settings(parsed.config)
        if parsed.basedir is not None:
            if not parsed.basedir:
                raise InvalidInputError(message="Base directory must not be empty")
            settings = settings.model_copy(update={"modules_dir": parsed.basedir})
        request = TagRequest.build(parsed.shortcuts or (), parsed.field)
    except ModinfoError as e:
        errors.write(f"modinfo: {e}\n")
        return 1

    release = parsed.release if parsed.release is not None else os.uname().release
    mode = OutputMode.nul() if parsed.null else OutputMode.newline()
    logger.debug("Kernel release %s, modules under %s", release, settings.modules_dir)

    resolve_and_scan(
        parsed.modules,
        release,
        request,
        settings=settings,
        mode=mode,
        stream=stdout if stdout is not None else sys.stdout.buffer,
        errors=errors,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
