"""Tests for TAP reporting."""

from __future__ import annotations

import io

from conftest import make_spec
from e2e_driver.models import TestOutcome
from e2e_driver.reporter import render_tap, report


def _outcome(name: str, passed: bool) -> TestOutcome:
    return TestOutcome(spec=make_spec(name), passed=passed)


def test_renders_plan_and_results_exactly() -> None:
    """Plan line first, then 1-based ok/not ok lines in recorded order."""
    outcomes = [_outcome("A", True), _outcome("B", False), _outcome("C", True)]

    assert render_tap(outcomes) == [
        "1..3",
        "ok 1 - A",
        "not ok 2 - B",
        "ok 3 - C",
    ]


def test_repeated_names_keep_distinct_indices() -> None:
    """Repeated tests are reported once per occurrence, never deduplicated."""
    outcomes = [_outcome("A", True), _outcome("A", False), _outcome("A", True)]

    assert render_tap(outcomes) == [
        "1..3",
        "ok 1 - A",
        "not ok 2 - A",
        "ok 3 - A",
    ]


def test_empty_run_emits_zero_plan() -> None:
    """No outcomes still produce a valid plan line."""
    assert render_tap([]) == ["1..0"]


def test_report_writes_lines_to_stream() -> None:
    """report writes newline-terminated TAP to the given stream and nothing else."""
    stream = io.StringIO()

    report([_outcome("TestLivenessHttp", True), _outcome("TestLivenessExec", False)], stream)

    assert stream.getvalue() == "1..2\nok 1 - TestLivenessHttp\nnot ok 2 - TestLivenessExec\n"


def test_report_defaults_to_stdout(capsys) -> None:
    """Without a stream the report goes to stdout."""
    report([_outcome("A", True)])

    captured = capsys.readouterr()
    assert captured.out == "1..1\nok 1 - A\n"
