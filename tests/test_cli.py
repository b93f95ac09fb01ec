import argparse
import json

from rallypairing.analysis import find_round_repeats
from rallypairing.models import Match
from rallypairing.testing.__main__ import (
    Colors,
    InteractiveSession,
    create_completer,
    execute_command,
    format_round,
    run_next_command,
    run_standard_mode,
)


def test_completer_offers_both_command_styles():
    completer = create_completer()

    assert "simulate" in completer.options
    assert "/simulate" in completer.options
    assert "/help" in completer.options


def test_format_round_highlights_repeats():
    history = [[Match(("A", "B"), ("C", "D"))]]
    matches = [Match(("A", "B"), ("C", "D"), court_id="Court 1")]

    lines = format_round(2, matches, find_round_repeats(matches, history))

    assert "Round 2" in lines[0]
    assert f"{Colors.FAIL}A+B{Colors.ENDC}" in lines[1]
    assert f"{Colors.WARNING}vs{Colors.ENDC}" in lines[1]
    assert lines[1].startswith("  Court 1: ")
    assert "(A-C, A-D, B-C, B-D)" in lines[1]


def test_format_round_without_matches():
    lines = format_round(1, [], find_round_repeats([], []))

    assert "no matches possible" in lines[1]


def test_execute_command_help_and_bad_arguments(capsys):
    assert execute_command("help", []) == 0
    assert execute_command("help", ["/simulate"]) == 0
    assert execute_command("simulate", ["--bogus"]) == 2
    assert "simulate" in capsys.readouterr().out


def test_simulate_then_validate(tmp_path, capsys):
    session_file = tmp_path / "session.json"
    report_file = tmp_path / "report.json"

    assert (
        run_standard_mode(
            [
                "simulate",
                "--players",
                "8",
                "--rounds",
                "3",
                "--seed",
                "1",
                "--quiet",
                "--output",
                str(session_file),
            ]
        )
        == 0
    )
    assert session_file.exists()

    assert (
        run_standard_mode(
            ["validate", "--file", str(session_file), "--export", str(report_file)]
        )
        == 0
    )
    report = json.loads(report_file.read_text(encoding="utf-8"))
    assert report["is_valid"] is True
    assert "Compliance" in capsys.readouterr().out


def test_validate_missing_file_reports_error(tmp_path, capsys):
    missing = tmp_path / "nope.json"

    assert run_standard_mode(["validate", "--file", str(missing)]) == 1
    assert "File not found" in capsys.readouterr().out


def test_next_command_steps_through_a_session():
    state = InteractiveSession()
    args = argparse.Namespace(
        players=4, courts=1, count=3, seed=3, reset=False, undo=False
    )

    assert run_next_command(args, state) == 0
    assert state.manager.current_round_number == 3

    args.undo = True
    assert run_next_command(args, state) == 0
    assert state.manager.current_round_number == 2
