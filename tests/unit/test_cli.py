"""Unit tests for the command-line entry point."""

import logging

import pytest

from nbodysim.cli import build_parser, main, settings_from_args
from nbodysim.core.settings import MAX_NUM_BODIES, MAX_NUM_WORKERS


class TestParser:
    """Tests for argument parsing."""

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.num_bodies == MAX_NUM_BODIES
        assert args.num_steps == 1000
        assert args.theta == 0.5
        assert args.num_workers == 1
        assert not args.gui
        assert not args.ring
        assert args.method == "barnes-hut"

    def test_positionals_and_flags(self):
        args = build_parser().parse_args(["100", "20", "0.0", "4", "-g", "-r"])
        assert (args.num_bodies, args.num_steps, args.theta, args.num_workers) == (100, 20, 0.0, 4)
        assert args.gui
        assert args.ring

    @pytest.mark.parametrize("argv", [["0"], ["10", "-5"], ["10", "10", "-0.5"], ["x"]])
    def test_rejects_invalid(self, argv):
        with pytest.raises(SystemExit):
            build_parser().parse_args(argv)

    def test_clamps_to_ceiling(self, caplog):
        args = build_parser().parse_args(["600", "10", "0.5", "64"])
        with caplog.at_level(logging.WARNING, logger="nbodysim.cli"):
            settings = settings_from_args(args)

        assert settings.num_bodies == MAX_NUM_BODIES
        assert settings.num_workers == MAX_NUM_WORKERS
        assert "num_bodies=600" in caplog.text


class TestMain:
    """Tests for main."""

    def test_sequential_run(self, capsys):
        assert main(["20", "3", "0.5", "1", "--seed", "1"]) == 0
        out = capsys.readouterr().out
        assert "num_bodies=20" in out
        assert "> Execution time:" in out

    def test_parallel_ring_run(self, capsys):
        assert main(["30", "2", "0.5", "4", "-r", "--seed", "2"]) == 0
        assert "> Execution time:" in capsys.readouterr().out

    def test_brute_force_run(self, capsys):
        assert main(["15", "2", "--method", "brute-force", "--seed", "3"]) == 0

    def test_sequential_flag(self, capsys):
        assert main(["15", "2", "0.5", "4", "--sequential", "--seed", "4"]) == 0
