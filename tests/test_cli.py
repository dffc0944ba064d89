"""Command line interface tests.

Each test drives ``run_cli`` through ``sys.argv`` with a private settings file
so values saved in the user's home directory never influence the results.
JSON printed to stdout is parsed and checked against the generators' output.
"""

from __future__ import annotations

import importlib
import json
import logging
import math
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

cli = importlib.import_module("morph_metrics.cli")
settings = importlib.import_module("morph_metrics.settings")


@pytest.fixture
def run(tmp_path, monkeypatch):
    """Return a helper invoking the CLI with an isolated settings file."""

    settings_file = tmp_path / "settings.json"

    def _run(*args: str) -> None:
        monkeypatch.setattr(
            sys, "argv", ["prog", "--settings-file", str(settings_file), *args]
        )
        cli.run_cli()

    _run.settings_file = settings_file
    return _run


def test_point_command_prints_json(run, capsys):
    """``point`` prints the morph and its achieved distance."""

    run("point", "--v1", "1,2,3,4", "--distance", "1", "--engine", "hill_climb")
    result = json.loads(capsys.readouterr().out)
    assert result["point"] == [0.0, 2.0, 3.0, 4.0]
    assert result["distance"] == pytest.approx(1.0)


def test_settings_file_feeds_search_options(run, capsys):
    """Saved settings are used when no override is given."""

    settings.save_settings({"max_iterations": 0}, run.settings_file)
    run("point", "--v1", "1,2,3,4", "--distance", "3", "--seed", "1")
    result = json.loads(capsys.readouterr().out)
    # No iterations allowed, so the search returns its start vector.
    assert result["point"] == [1.0, 2.0, 3.0, 4.0]
    assert result["distance"] == 0.0


def test_command_line_overrides_settings(run, capsys):
    """Command line options win over saved settings."""

    settings.save_settings({"max_iterations": 0}, run.settings_file)
    run(
        "point",
        "--v1", "1,2,3,4",
        "--distance", "1",
        "--engine", "hill_climb",
        "--max-iterations", "50",
    )
    result = json.loads(capsys.readouterr().out)
    assert result["point"] == [0.0, 2.0, 3.0, 4.0]


def test_save_settings_persists_merged_options(run, capsys):
    """``--save-settings`` stores saved values merged with command line overrides."""

    settings.save_settings({"min_step_size": 0.2, "colour": "blue"}, run.settings_file)
    run(
        "--save-settings",
        "point",
        "--v1", "1,2",
        "--distance", "1",
        "--epsilon", "0.05",
        "--max-iterations", "0",
    )
    capsys.readouterr()
    assert settings.load_settings(run.settings_file) == {
        "min_step_size": 0.2,
        "colour": "blue",
        "epsilon": 0.05,
        "max_iterations": 0,
    }


def test_settings_not_written_without_flag(run, capsys):
    """Plain runs never create a settings file."""

    run("point", "--v1", "1,2", "--distance", "1", "--epsilon", "0.05", "--max-iterations", "0")
    capsys.readouterr()
    assert not run.settings_file.exists()


def test_set_command_reports_partial_sets(run, capsys):
    """A deterministic engine keeps finding the same morph, so the set stays small."""

    run(
        "set",
        "--v1", "1,2,3,4",
        "--distance", "1",
        "--engine", "hill_climb",
        "--set-size", "3",
        "--max-failures", "2",
    )
    result = json.loads(capsys.readouterr().out)
    assert result["points"] == [[0.0, 2.0, 3.0, 4.0]]
    assert result["distances"] == [pytest.approx(1.0)]


def test_path_command_with_cheat(run, capsys):
    """``path --cheat`` ends exactly at ``--v2``."""

    run("path", "--v1", "0,0", "--v2", "4,4", "--steps", "4", "--cheat", "--seed", "2")
    result = json.loads(capsys.readouterr().out)
    assert len(result["path"]) == 5
    assert result["path"][0] == [0.0, 0.0]
    assert result["path"][-1] == [4.0, 4.0]
    assert result["distances_from_v1"][-1] == pytest.approx(math.sqrt(32))


def test_seed_is_logged(run, capsys, caplog):
    """The random seed is reported so runs can be repeated."""

    caplog.set_level(logging.INFO)
    run("point", "--v1", "1,2", "--distance", "1", "--seed", "5", "--max-iterations", "0")
    capsys.readouterr()
    assert "Using random seed 5" in caplog.text


def test_list_metrics(run, capsys):
    """``--list-metrics`` prints the registries and exits normally."""

    run("--list-metrics")
    out = capsys.readouterr().out
    assert "euclidean" in out
    assert "hill_climb_stochastic" in out


def test_missing_command_exits(run, capsys):
    """Running without a subcommand prints help and fails."""

    with pytest.raises(SystemExit) as excinfo:
        run()
    assert excinfo.value.code == 1
    assert "usage" in capsys.readouterr().out.lower()


@pytest.mark.parametrize(
    "args, message",
    [
        (("point", "--v1", "1,2", "--distance", "1", "--metric", "ulm"), "Unknown metric"),
        (("point", "--v1", "1,2", "--distance", "1", "--engine", "annealing"), "Unknown search function"),
        (("point", "--v1", "1,a", "--distance", "1"), "Invalid vector"),
        (("point", "--v1", ",", "--distance", "1"), "at least one number"),
        (("point", "--v1", "1,2", "--distance", "1", "--epsilon", "-1"), "epsilon"),
        (("point", "--v1", "1,2", "--distance", "-1"), "non-negative"),
        (("path", "--v1", "1,2", "--v2", "1,2,3"), "mismatch"),
        (("path", "--v1", "1,2", "--v2", "3,4", "--steps", "0"), "steps"),
    ],
)
def test_invalid_input_exits_with_error(run, caplog, args, message):
    """Validation failures are logged and exit with status 1."""

    with pytest.raises(SystemExit) as excinfo:
        run(*args)
    assert excinfo.value.code == 1
    assert message in caplog.text


def test_exhausted_retries_exit(run, caplog):
    """A search that only returns repeated coordinates fails cleanly."""

    with pytest.raises(SystemExit) as excinfo:
        # Distance 0 from a morph with a repeated value can only return that morph.
        run(
            "point",
            "--v1", "1,1",
            "--distance", "0",
            "--engine", "hill_climb",
            "--max-retries", "2",
        )
    assert excinfo.value.code == 1
    assert "Search failed" in caplog.text
