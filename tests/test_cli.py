"""Tests for snapstore._cli — argument parsing and command dispatch."""

from __future__ import annotations

from pathlib import Path

import pytest

from snapstore._cli import _build_parser, main


class TestBuildParser:
    """_build_parser — CLI argument parsing."""

    def test_demo_default_args(self) -> None:
        args = _build_parser().parse_args(["demo"])
        assert args.command == "demo"
        assert args.root == "."
        assert args.multiplier == 3
        assert args.trace is False

    def test_demo_all_flags(self) -> None:
        args = _build_parser().parse_args(
            ["demo", "--root", "conf/", "--multiplier", "5", "--trace"]
        )
        assert args.root == "conf/"
        assert args.multiplier == 5
        assert args.trace is True

    def test_config_default_root(self) -> None:
        args = _build_parser().parse_args(["config"])
        assert args.command == "config"
        assert args.root == "."

    def test_no_command_returns_none(self) -> None:
        assert _build_parser().parse_args([]).command is None


class TestMain:
    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 0
        assert "snapstore" in capsys.readouterr().out

    def test_config_prints_resolved_values(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        (tmp_path / "snapstore.yaml").write_text("fanout: per_topic\n")
        main(["config", str(tmp_path)])
        out = capsys.readouterr().out
        assert "fanout = 'per_topic'" in out
        assert "trace = False" in out

    def test_demo_runs(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["demo", "--root", str(tmp_path), "--multiplier", "2", "--trace"])
        out = capsys.readouterr().out
        assert "counter changed: 4" in out
        assert "final state: CounterState(counter=4, enabled=True)" in out
        assert "events:" in out

    def test_bad_config_exits_nonzero(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        (tmp_path / "snapstore.yaml").write_text("fanout: twice\n")
        with pytest.raises(SystemExit) as exc:
            main(["config", str(tmp_path)])
        assert exc.value.code == 1
        assert "fanout" in capsys.readouterr().err
