"""Tests for the command line entry point (headless mode)."""

import signal
from unittest import mock

import pytest

from tweak_launcher import main as main_module
from tweak_launcher.config import Config
from tweak_launcher.main import build_parser, exit_status, main
from tests.conftest import posix_only, write_script


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Never touch the real config file or the global log sinks."""
    monkeypatch.setattr(main_module, "load_config", lambda: Config())
    monkeypatch.setattr(main_module, "setup_logging", lambda verbose=False: None)


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.headless is False
        assert args.target is None
        assert args.tweaks_dir is None

    def test_options(self):
        args = build_parser().parse_args(
            ["--headless", "--target", "/x", "--tweaks-dir", "/t", "-v"]
        )
        assert (args.headless, args.target, args.tweaks_dir, args.verbose) == (
            True,
            "/x",
            "/t",
            True,
        )


@posix_only
class TestHeadless:
    def test_streams_output_and_returns_exit_code(self, tmp_path, capsys):
        exe = write_script(tmp_path / "server", "echo hello from target; exit 4")
        (tmp_path / "tweaks").mkdir()

        code = main(
            ["--headless", "--tweaks-dir", str(tmp_path / "tweaks"), "--target", str(exe)]
        )

        assert code == 4
        assert "hello from target" in capsys.readouterr().out

    def test_signal_death_maps_to_shell_status(self, tmp_path):
        exe = write_script(tmp_path / "server", "kill -TERM $$")

        code = main(["--headless", "--tweaks-dir", str(tmp_path), "--target", str(exe)])

        assert code == 128 + signal.SIGTERM

    def test_unresolvable_target(self, tmp_path):
        code = main(["--headless", "--target", str(tmp_path / "nothing")])
        assert code == 1

    def test_no_target(self, tmp_path):
        code = main(["--headless", "--tweaks-dir", str(tmp_path)])
        assert code == 1


class TestExitStatus:
    def test_normal_exit_unchanged(self):
        assert exit_status(0) == 0
        assert exit_status(4) == 4

    def test_signal_exit(self):
        assert exit_status(-15) == 143
        assert exit_status(-9) == 137


class TestGuiDispatch:
    def test_gui_mode_gets_overrides(self, tmp_path):
        with mock.patch.object(main_module, "run_gui", return_value=0) as run_gui:
            assert main(["--target", "/apps/x", "--tweaks-dir", str(tmp_path)]) == 0

        config = run_gui.call_args.args[0]
        assert config.target_path == "/apps/x"
        assert config.tweaks_dir == str(tmp_path)
