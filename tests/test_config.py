"""Tests for run configuration resolution and validation."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
import typer
from pydantic import ValidationError

from e2e_driver.config import DriverOptions, RunConfig, display_config, resolve_config, validate_options
from e2e_driver.constants import ASSETS_DIR, DEFAULT_RUN_TIMEOUT_SECONDS
from e2e_driver.utils import resolve_bool_flag


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop any E2E_* variables leaking in from the environment."""
    for name in ("HOST", "NAMESPACE", "KUBECONFIG", "PROVIDER", "REPO_ROOT", "KUBECTL_TIMEOUT",
                 "SKIP_PREREQ_CHECK"):
        monkeypatch.delenv(f"E2E_{name}", raising=False)


def test_defaults() -> None:
    """Unconfigured runs use the default namespace and bundled assets."""
    cfg = RunConfig()

    assert cfg.namespace == "default"
    assert cfg.repo_root == ASSETS_DIR
    assert cfg.host is None


def test_env_vars_are_loaded(monkeypatch: pytest.MonkeyPatch) -> None:
    """E2E_* environment variables populate the config."""
    monkeypatch.setenv("E2E_HOST", "https://api.example:6443")
    monkeypatch.setenv("E2E_NAMESPACE", "smoke")
    monkeypatch.setenv("E2E_KUBECTL_TIMEOUT", "90")

    cfg = RunConfig()

    assert cfg.host == "https://api.example:6443"
    assert cfg.namespace == "smoke"
    assert cfg.kubectl_timeout == 90


def test_cli_overrides_beat_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """resolve_config gives CLI values priority over the environment."""
    monkeypatch.setenv("E2E_NAMESPACE", "from-env")
    monkeypatch.setenv("E2E_PROVIDER", "gce")

    cfg = resolve_config(namespace="from-cli", repo_root=tmp_path)

    assert cfg.namespace == "from-cli"
    assert cfg.repo_root == tmp_path
    assert cfg.provider == "gce"


def test_config_is_read_only() -> None:
    """The run configuration cannot be mutated once built."""
    cfg = RunConfig()

    with pytest.raises(ValidationError):
        cfg.namespace = "other"


def test_invalid_kubectl_timeout_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    """Out-of-range settings fail validation."""
    monkeypatch.setenv("E2E_KUBECTL_TIMEOUT", "0")

    with pytest.raises(ValidationError):
        RunConfig()


@pytest.mark.parametrize("times, timeout, test_timeout, message", [
    (-1, 600, None, "--times"),
    (1, 0, None, "--timeout"),
    (1, 600, 0, "--test-timeout"),
])
def test_validate_options_rejects_bad_values(
    times: int, timeout: float, test_timeout: float | None, message: str
) -> None:
    """Out-of-range option values raise BadParameter naming the flag."""
    with pytest.raises(typer.BadParameter, match=message):
        validate_options(times, timeout, test_timeout)


def test_validate_options_warns_on_shadowed_test_timeout(caplog: pytest.LogCaptureFixture) -> None:
    """A per-test deadline at or above the run ceiling is warned about."""
    validate_options(1, 60, 120)

    assert any(r.levelno == logging.WARNING and "--test-timeout" in r.getMessage() for r in caplog.records)


def test_driver_options_defaults() -> None:
    """Defaults run everything once with a clock seed and the 10 minute ceiling."""
    options = DriverOptions()

    assert options.tests == ()
    assert options.times == 1
    assert options.orderseed == 0
    assert options.timeout == DEFAULT_RUN_TIMEOUT_SECONDS == 600
    assert options.test_timeout is None


def test_display_config_runs(run_config: RunConfig) -> None:
    """display_config renders without error for a typical config."""
    display_config(run_config, DriverOptions(tests=("TestLivenessHttp",), orderseed=42, test_timeout=30))


def test_resolve_bool_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    """An E2E_<NAME> env var can switch a boolean flag on."""
    assert resolve_bool_flag("skip_prereq_check", True) is True
    assert resolve_bool_flag("skip_prereq_check", False) is False

    monkeypatch.setenv("E2E_SKIP_PREREQ_CHECK", "true")
    assert resolve_bool_flag("skip_prereq_check", False) is True
