"""Tests for the typer command-line interface."""

from __future__ import annotations

from typing import Any

import pytest
from typer.testing import CliRunner

from e2e_driver import cli
from e2e_driver.config import DriverOptions, RunConfig


class RunRecorder:
    """Stands in for run_e2e_tests and records what the CLI resolved."""

    def __init__(self, result: bool) -> None:
        self.result = result
        self.cfg: RunConfig | None = None
        self.options: DriverOptions | None = None

    def __call__(self, registry: Any, cfg: RunConfig, options: DriverOptions) -> bool:
        self.cfg = cfg
        self.options = options
        return self.result


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _install(monkeypatch: pytest.MonkeyPatch, result: bool) -> RunRecorder:
    recorder = RunRecorder(result)
    monkeypatch.setattr(cli, "run_e2e_tests", recorder)
    return recorder


def test_list_prints_registered_checks(runner: CliRunner) -> None:
    """list shows every registered check in base order."""
    result = runner.invoke(cli.app, ["list"])

    assert result.exit_code == 0
    assert result.stdout.split() == ["TestLivenessHttp", "TestLivenessExec"]


def test_run_exits_zero_when_all_pass(runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    """A passing run exits 0."""
    _install(monkeypatch, True)

    result = runner.invoke(cli.app, ["run", "--skip-prereq-check"])

    assert result.exit_code == 0


def test_run_exits_one_when_any_fail(runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    """A failing run exits 1."""
    _install(monkeypatch, False)

    result = runner.invoke(cli.app, ["run", "--skip-prereq-check"])

    assert result.exit_code == 1


def test_run_passes_options_through(runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    """Flags are parsed into DriverOptions and RunConfig."""
    recorder = _install(monkeypatch, True)

    result = runner.invoke(cli.app, [
        "run", "--skip-prereq-check",
        "-t", "TestLivenessExec", "-t", "TestLivenessHttp",
        "--times", "3", "--orderseed", "0x10",
        "--timeout", "120", "--test-timeout", "30",
        "--namespace", "smoke", "--host", "https://api:6443",
    ])

    assert result.exit_code == 0
    assert recorder.options == DriverOptions(
        tests=("TestLivenessExec", "TestLivenessHttp"),
        times=3, orderseed=16, timeout=120, test_timeout=30,
    )
    assert recorder.cfg.namespace == "smoke"
    assert recorder.cfg.host == "https://api:6443"


def test_decimal_orderseed_is_accepted(runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    """A decimal seed parses as an integer."""
    recorder = _install(monkeypatch, True)

    runner.invoke(cli.app, ["run", "--skip-prereq-check", "--orderseed", "1234"])

    assert recorder.options.orderseed == 1234


@pytest.mark.parametrize("args", [
    ["--times", "-1"],
    ["--timeout", "0"],
    ["--orderseed", "not-a-seed"],
])
def test_bad_options_are_usage_errors(
    runner: CliRunner, monkeypatch: pytest.MonkeyPatch, args: list[str]
) -> None:
    """Invalid option values are rejected before any test runs."""
    recorder = _install(monkeypatch, True)

    result = runner.invoke(cli.app, ["run", "--skip-prereq-check", *args])

    assert result.exit_code == 2
    assert recorder.options is None


def test_missing_kubectl_fails(runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    """Without --skip-prereq-check a missing kubectl stops the run."""
    recorder = _install(monkeypatch, True)
    monkeypatch.delenv("E2E_SKIP_PREREQ_CHECK", raising=False)

    def _missing(cmd: str) -> None:
        raise RuntimeError(f"Required command '{cmd}' not found")

    monkeypatch.setattr(cli, "require_command", _missing)

    result = runner.invoke(cli.app, ["run"])

    assert result.exit_code != 0
    assert isinstance(result.exception, RuntimeError)
    assert recorder.options is None
