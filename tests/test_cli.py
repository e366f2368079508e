"""Tests for the modinfo command line interface."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from kmodinfo.cli import main, parse_args
from kmodinfo.config import CONFIG_ENV_VAR
from kmodinfo.tags import Shortcut


@pytest.fixture(autouse=True)
def _clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)


def _main(*args: str) -> tuple[int, bytes, str]:
    out = io.BytesIO()
    err = io.StringIO()
    rc = main(list(args), stdout=out, stderr=err)
    return rc, out.getvalue(), err.getvalue()


class TestParseArgs:
    def test_shortcut_flags(self) -> None:
        parsed = parse_args(["-n", "-l", "--firmware", "-D", "loop"])
        assert parsed.shortcuts == [Shortcut.FILENAME, Shortcut.LICENSE, Shortcut.FIRMWARE, Shortcut.DEPENDS]
        assert parsed.modules == ["loop"]

    def test_combined_short_flags(self) -> None:
        parsed = parse_args(["-ad0", "x"])
        assert parsed.shortcuts == [Shortcut.AUTHOR, Shortcut.DESCRIPTION]
        assert parsed.null is True

    def test_defaults(self) -> None:
        parsed = parse_args(["a", "b"])
        assert parsed.shortcuts is None
        assert parsed.field is None
        assert parsed.null is False
        assert parsed.release is None
        assert parsed.modules == ["a", "b"]

    def test_module_required(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            parse_args([])
        assert exc_info.value.code == 2


class TestMain:
    def test_single_tag(self, modules_dir: Path, release: str) -> None:
        rc, out, err = _main("-b", str(modules_dir), "-k", release, "-l", "loop")
        assert rc == 0
        assert out == b"GPL\n"
        assert err == ""

    def test_default_shows_all_tags(self, modules_dir: Path, release: str) -> None:
        rc, out, _ = _main("-b", str(modules_dir), "-k", release, "loop")
        assert rc == 0
        assert out.decode().splitlines() == [
            "filename:       kernel/drivers/block/loop.ko",
            "license:        GPL",
            "author:         Jane Hacker <jane@example.org>",
            "description:    Loopback device support",
            "alias:          block-major-7-*",
            "alias:          devname:loop-control",
            "depends:        ",
            "vermagic:       6.1.0-test SMP preempt mod_unload",
            "parm:           max_loop:Maximum number of loop devices (int)",
        ]

    def test_field_only_unlabelled(self, modules_dir: Path, release: str) -> None:
        rc, out, _ = _main("-b", str(modules_dir), "-k", release, "-F", "vermagic", "loop")
        assert rc == 0
        assert out == b"6.1.0-test SMP preempt mod_unload\n"

    def test_null_separator(self, modules_dir: Path, release: str) -> None:
        rc, out, _ = _main("-b", str(modules_dir), "-k", release, "-0", "-n", "-l", "loop", "foo_bar")
        assert rc == 0
        assert out == (
            b"filename:       kernel/drivers/block/loop.ko\x00"
            b"license:        GPL\x00"
            b"filename:       kernel/misc/foo-bar.ko.gz\x00"
            b"license:        Dual MIT/GPL\x00"
        )

    def test_unreadable_module_still_succeeds(self, modules_dir: Path, release: str) -> None:
        rc, out, err = _main("-b", str(modules_dir), "-k", release, "-l", "nosuchmod", "loop")
        assert rc == 0
        assert out == b"GPL\n"
        assert err == "modinfo: nosuchmod: No such file or directory\n"

    def test_config_file(self, tmp_path: Path, modules_dir: Path, release: str) -> None:
        config = tmp_path / "modinfo.yaml"
        config.write_text(f"modules_dir: {modules_dir}\n")
        rc, out, _ = _main("--config", str(config), "-k", release, "-F", "version", "foo_bar")
        assert rc == 0
        assert out == b"1.2\n"

    def test_basedir_overrides_config(self, tmp_path: Path, modules_dir: Path, release: str) -> None:
        config = tmp_path / "modinfo.yaml"
        config.write_text("modules_dir: /nonexistent\n")
        rc, out, _ = _main("--config", str(config), "-b", str(modules_dir), "-k", release, "-l", "loop")
        assert rc == 0
        assert out == b"GPL\n"

    def test_invalid_config(self, tmp_path: Path) -> None:
        config = tmp_path / "bad.yaml"
        config.write_text("{{invalid yaml:")
        rc, out, err = _main("--config", str(config), "loop")
        assert rc == 1
        assert out == b""
        assert err.startswith("modinfo: [CONFIG_INVALID]")

    def test_missing_config(self, tmp_path: Path) -> None:
        rc, _, err = _main("--config", str(tmp_path / "nope.yaml"), "loop")
        assert rc == 1
        assert err.startswith("modinfo: [CONFIG_NOT_FOUND]")

    def test_empty_field(self) -> None:
        rc, _, err = _main("-F", "", "loop")
        assert rc == 1
        assert "[GENERAL_INVALID_INPUT]" in err

    def test_running_kernel_release(self, tmp_path: Path) -> None:
        """Without -k the release of the running kernel is used."""
        module = tmp_path / "m.ko"
        module.write_bytes(b"\x00license=GPL\x00")
        rc, out, _ = _main("-b", str(tmp_path / "none"), "-l", str(module))
        assert rc == 0
        assert out == b"GPL\n"


class TestUnreadableConfig:
    def test_config_path_is_directory(self, tmp_path: Path) -> None:
        rc, out, err = _main("--config", str(tmp_path), "loop")
        assert rc == 1
        assert out == b""
        assert err.startswith("modinfo: [CONFIG_INVALID] Cannot read settings file")

    def test_config_not_utf8(self, tmp_path: Path) -> None:
        config = tmp_path / "latin1.yaml"
        config.write_bytes(b"modules_dir: /\xff\n")
        rc, _, err = _main("--config", str(config), "loop")
        assert rc == 1
        assert err.startswith("modinfo: [CONFIG_INVALID] Cannot read settings file")


class TestBasedir:
    def test_empty_basedir_rejected(self) -> None:
        """An explicit empty -b is an error, not a silent default."""
        rc, out, err = _main("-b", "", "loop")
        assert rc == 1
        assert out == b""
        assert err == "modinfo: [GENERAL_INVALID_INPUT] Base directory must not be empty\n"
