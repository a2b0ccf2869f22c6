"""Tests for the CLI launcher."""

import json

import pytest

from q_snake.ai.cli import _build_parser, main


class TestCLIParser:
    def test_no_command_returns_1(self):
        assert main([]) == 1

    def test_train_defaults(self):
        parser = _build_parser()
        args = parser.parse_args(["train"])
        assert args.command == "train"
        assert args.config is None
        assert args.episodes is None
        assert args.boundary is None
        assert not args.show_board

    def test_train_with_flags(self):
        parser = _build_parser()
        args = parser.parse_args([
            "train",
            "--episodes", "500",
            "--grid-width", "15",
            "--boundary", "walled",
            "--state-encoding", "position",
            "--fallback", "any_safe",
        ])
        assert args.episodes == 500
        assert args.grid_width == 15
        assert args.boundary == "walled"
        assert args.state_encoding == "position"
        assert args.fallback == "any_safe"

    def test_benchmark_defaults(self):
        parser = _build_parser()
        args = parser.parse_args(["benchmark"])
        assert args.command == "benchmark"
        assert args.num_episodes == 100
        assert args.state_encoding == "full"

    def test_rejects_unknown_boundary(self):
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["train", "--boundary", "torus"])


class TestCLITrain:
    def test_train_short_run(self, capsys):
        result = main([
            "train",
            "--episodes", "3",
            "--training-episodes", "2",
            "--grid-width", "8",
            "--grid-height", "8",
            "--state-encoding", "position",
            "--max-steps", "30",
            "--log-interval", "1",
            "--seed", "0",
            "--show-board",
        ])
        assert result == 0
        out = capsys.readouterr().out
        assert "Episodes: 3" in out
        assert "H" in out

    def test_save_and_load_config(self, tmp_path):
        path = tmp_path / "cfg.json"
        result = main([
            "train",
            "--episodes", "1",
            "--grid-width", "8",
            "--grid-height", "8",
            "--state-encoding", "position",
            "--max-steps", "10",
            "--save-config", str(path),
        ])
        assert result == 0
        saved = json.loads(path.read_text())
        assert saved["grid_width"] == 8
        assert saved["max_episodes"] == 1

        assert main(["train", "--config", str(path)]) == 0

    def test_invalid_config_is_usage_error(self):
        with pytest.raises(SystemExit, match="2"):
            main(["train", "--epsilon-start", "0.05", "--epsilon-end", "0.5"])


class TestCLIBenchmark:
    def test_benchmark_runs(self, capsys):
        result = main([
            "benchmark",
            "--num-episodes", "3",
            "--grid-width", "8",
            "--grid-height", "8",
            "--max-steps", "20",
            "--state-encoding", "position",
        ])
        assert result == 0
        captured = capsys.readouterr()
        assert "Benchmark:" in captured.out
        assert "episodes/s" in captured.out

    def test_benchmark_num_episodes_must_be_positive(self):
        with pytest.raises(SystemExit, match="2"):
            main(["benchmark", "--num-episodes", "0"])
