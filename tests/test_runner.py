# keywords: [runner tests, cli, exit codes, config merge]
"""Tests for the command-line runner."""

import argparse
import json
from pathlib import Path

import pytest

import runner
from export import TraceLoader
from interfaces import NO_PACING, PacingConfig

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
CATALOG = str(DATA_DIR / "challenges.json")
PROGRAMS = DATA_DIR / "programs"


def write_program(tmp_path, program, name="program.json"):
    path = tmp_path / name
    path.write_text(json.dumps(program))
    return str(path)


def make_args(**overrides):
    values = dict(
        catalog=Path(CATALOG), challenge="c1_reach_treasure", program=PROGRAMS / "reach_treasure.json",
        config=None, fast=False, move_delay=None, turn_delay=None, ignore_block_limit=False,
        export_dir=None, quiet=False, log_level=None,
    )
    values.update(overrides)
    return argparse.Namespace(**values)


class TestConfig:
    """Defaults, config file, then command-line flags."""

    def test_merge_configs_is_recursive(self):
        base = {"pacing": {"move_delay": 0.4, "turn_delay": 0.2}, "run_name": "run"}
        merged = runner.merge_configs(base, {"pacing": {"move_delay": 0.1}})
        assert merged == {"pacing": {"move_delay": 0.1, "turn_delay": 0.2}, "run_name": "run"}
        assert base["pacing"]["move_delay"] == 0.4

    def test_defaults(self):
        config = runner.create_run_config(make_args())
        assert config.pacing == PacingConfig()
        assert config.enforce_block_limit
        assert config.log_to_console

    def test_config_file_then_flags(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({
            "pacing": {"move_delay": 0.1},
            "run_name": "nightly",
            "challenge_id": "from_file",
        }))
        config = runner.create_run_config(make_args(config=config_path, turn_delay=0.05, quiet=True))
        assert config.pacing == PacingConfig(move_delay=0.1, turn_delay=0.05)
        assert config.run_name == "nightly"
        # Positional arguments always win
        assert config.challenge_id == "c1_reach_treasure"
        assert not config.log_to_console

    def test_fast_disables_pacing(self):
        config = runner.create_run_config(make_args(fast=True, ignore_block_limit=True, log_level="DEBUG"))
        assert config.pacing == NO_PACING
        assert not config.enforce_block_limit
        assert config.log_level == "DEBUG"


class TestMain:
    """End-to-end runs through main()."""

    def test_success(self, capsys):
        code = runner.main([CATALOG, "c1_reach_treasure", str(PROGRAMS / "reach_treasure.json"), "--fast"])
        assert code == runner.EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "SUCCESS" in out
        assert "at (2, 2) facing down" in out

    def test_collectible_challenge(self):
        code = runner.main([CATALOG, "s2_square_dance", str(PROGRAMS / "square_dance.json"), "--fast", "--quiet"])
        assert code == runner.EXIT_SUCCESS

    def test_illegal_move_fails(self):
        # Four steps right run off a 3x3 grid
        code = runner.main([CATALOG, "c1_reach_treasure", str(PROGRAMS / "square_dance.json"), "--fast", "--quiet"])
        assert code == runner.EXIT_FAILURE

    def test_empty_program_fails(self, tmp_path):
        program = write_program(tmp_path, [])
        assert runner.main([CATALOG, "c1_reach_treasure", program, "--fast", "--quiet"]) == runner.EXIT_FAILURE

    def test_quiet_prints_nothing(self, capsys):
        runner.main([CATALOG, "c1_reach_treasure", str(PROGRAMS / "reach_treasure.json"), "--fast", "--quiet"])
        assert capsys.readouterr().out == ""

    @pytest.mark.parametrize("challenge,program", [
        ("missing_challenge", [{"cmd": "move"}]),
        ("c1_reach_treasure", {"cmd": "move"}),
    ])
    def test_rejected_inputs(self, tmp_path, challenge, program):
        path = write_program(tmp_path, program)
        assert runner.main([CATALOG, challenge, path, "--fast", "--quiet"]) == runner.EXIT_REJECTED

    def test_missing_files_are_rejected(self, tmp_path):
        missing = str(tmp_path / "missing.json")
        program = str(PROGRAMS / "reach_treasure.json")
        assert runner.main([missing, "c1_reach_treasure", program, "--fast", "--quiet"]) == runner.EXIT_REJECTED
        assert runner.main([CATALOG, "c1_reach_treasure", missing, "--fast", "--quiet"]) == runner.EXIT_REJECTED

    @pytest.mark.parametrize("document", [
        {"pacing": {"move_speed": 0.1}},
        {"colour": "blue"},
        {"pacing": {"move_delay": -1}},
    ])
    def test_bad_config_file_is_rejected(self, tmp_path, document):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps(document))
        code = runner.main([
            CATALOG, "c1_reach_treasure", str(PROGRAMS / "reach_treasure.json"),
            "--quiet", "--config", str(config_path),
        ])
        assert code == runner.EXIT_REJECTED

    def test_missing_config_file_is_rejected(self, tmp_path):
        code = runner.main([
            CATALOG, "c1_reach_treasure", str(PROGRAMS / "reach_treasure.json"),
            "--quiet", "--config", str(tmp_path / "nope.json"),
        ])
        assert code == runner.EXIT_REJECTED

    def test_block_limit(self, tmp_path, capsys):
        program = write_program(tmp_path, [{"cmd": "move"}] * 2 + [{"cmd": "turn"}] + [{"cmd": "move"}] * 2)
        assert runner.main([CATALOG, "c1_reach_treasure", program, "--fast"]) == runner.EXIT_REJECTED
        assert "Too many blocks: 5 / 3" in capsys.readouterr().out
        code = runner.main([CATALOG, "c1_reach_treasure", program, "--fast", "--quiet", "--ignore-block-limit"])
        assert code == runner.EXIT_SUCCESS

    def test_export(self, tmp_path):
        code = runner.main([
            CATALOG, "s1_star_row", str(PROGRAMS / "reach_treasure.json"),
            "--fast", "--quiet", "--export-dir", str(tmp_path),
        ])
        assert code == runner.EXIT_FAILURE
        session_dir = next(tmp_path.glob("run_*"))
        with TraceLoader(session_dir) as loader:
            trace = loader.get_run(0)
            assert trace.challenge_id == "s1_star_row"
            assert trace.outcome == "incomplete"
            assert trace.success is False
            assert trace.states[-1].position == (2, 2)
