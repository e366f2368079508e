"""Shared pytest fixtures for the kmodinfo test suite."""

from __future__ import annotations

import gzip
from pathlib import Path

import pytest

from kmodinfo.config import ModinfoSettings

RELEASE = "6.1.0-test"


# === Module images ===


def make_image(*records: bytes, boundary: bytes = b"\x00") -> bytes:
    """Build a fake module image with ``records`` embedded as tag records."""
    body = b"".join(boundary + rec + b"\x00" for rec in records)
    return b"\x7fELF\x02\x01\x01" + b"\x11" * 16 + body + b"\x00\xff\xfe"


LOOP_IMAGE = make_image(
    b"license=GPL",
    b"author=Jane Hacker <jane@example.org>",
    b"description=Loopback device support",
    b"alias=block-major-7-*",
    b"alias=devname:loop-control",
    b"depends=",
    b"vermagic=6.1.0-test SMP preempt mod_unload",
    b"parm=max_loop:Maximum number of loop devices (int)",
)

FOO_BAR_IMAGE = make_image(
    b"license=Dual MIT/GPL",
    b"version=1.2",
    b"depends=loop",
)


# === Fixtures ===


@pytest.fixture
def loop_image() -> bytes:
    return LOOP_IMAGE


@pytest.fixture
def modules_dir(tmp_path: Path) -> Path:
    """A /lib/modules-like tree with a release folder and a modules.dep index."""
    base = tmp_path / "modules"
    tree = base / RELEASE
    (tree / "kernel" / "drivers" / "block").mkdir(parents=True)
    (tree / "kernel" / "misc").mkdir(parents=True)

    (tree / "kernel" / "drivers" / "block" / "loop.ko").write_bytes(LOOP_IMAGE)
    (tree / "kernel" / "misc" / "foo-bar.ko.gz").write_bytes(gzip.compress(FOO_BAR_IMAGE))

    (tree / "modules.dep").write_text(
        "# generated for tests\n"
        "kernel/drivers/block/loop.ko:\n"
        "kernel/misc/foo-bar.ko.gz: kernel/drivers/block/loop.ko\n"
        "kernel/misc/missing.ko:\n"
    )
    return base


@pytest.fixture
def settings(modules_dir: Path) -> ModinfoSettings:
    return ModinfoSettings(modules_dir=str(modules_dir))


@pytest.fixture
def image_factory():
    """Factory building module images from raw tag records."""
    return make_image


@pytest.fixture
def release() -> str:
    """Kernel release the module tree is built for."""
    return RELEASE
