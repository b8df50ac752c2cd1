# /*
# Copyright 2026 The e2e-driver Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# */

"""Run configuration, driver options, and config resolution/display."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import typer
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.panel import Panel

from e2e_driver import console, logger
from e2e_driver.constants import (
    ASSETS_DIR,
    DEFAULT_KUBECTL_TIMEOUT_SECONDS,
    DEFAULT_REPEAT_COUNT,
    DEFAULT_RUN_TIMEOUT_SECONDS,
    NS_DEFAULT,
)


# ============================================================================
# Configuration classes
# ============================================================================

class RunConfig(BaseSettings):
    """Connection parameters shared read-only by every test body.

    Auto-loaded from E2E_* env vars; CLI flags override via ``resolve_config``.

    Attributes:
        auth_config: Path to a kubeconfig-style auth file, or None.
        cert_dir: Directory holding ``ca.crt`` for the API server, or None.
        host: Kubernetes API server address, or None to use the kubeconfig.
        repo_root: Root directory that test assets are resolved against.
        provider: Cloud provider identity the cluster runs on.
        kubeconfig: Explicit kubeconfig path, or None for kubectl's default.
        context: kubeconfig context name, or None for the current context.
        namespace: Namespace test resources are created in.
        kubectl_timeout: Maximum seconds for a single kubectl invocation.
    """

    model_config = SettingsConfigDict(env_prefix="E2E_", extra="ignore", frozen=True)

    auth_config: str | None = None
    cert_dir: str | None = None
    host: str | None = None
    repo_root: Path = ASSETS_DIR
    provider: str = ""
    kubeconfig: str | None = None
    context: str | None = None
    namespace: str = NS_DEFAULT
    kubectl_timeout: int = Field(default=DEFAULT_KUBECTL_TIMEOUT_SECONDS, ge=1)


# ============================================================================
# Driver options
# ============================================================================

@dataclass(frozen=True)
class DriverOptions:
    """Scheduling and timeout knobs for a single driver invocation.

    Attributes:
        tests: Names of tests to run; empty means all registered tests.
        times: Number of times the selected list is repeated.
        orderseed: Shuffle seed, or 0 to derive one from the clock.
        timeout: Global ceiling in seconds before the watchdog aborts the run.
        test_timeout: Per-test deadline in seconds, or None for no deadline.
    """

    tests: tuple[str, ...] = field(default_factory=tuple)
    times: int = DEFAULT_REPEAT_COUNT
    orderseed: int = 0
    timeout: float = DEFAULT_RUN_TIMEOUT_SECONDS
    test_timeout: float | None = None


# ============================================================================
# Config resolution
# ============================================================================

def validate_options(times: int, timeout: float, test_timeout: float | None) -> None:
    """Validate driver option values and their combinations.

    Args:
        times: Requested repeat count.
        timeout: Global run ceiling in seconds.
        test_timeout: Per-test deadline in seconds, or None.

    Raises:
        typer.BadParameter: If a value is out of range.
    """
    if times < 0:
        raise typer.BadParameter("--times must be zero or greater")
    if timeout <= 0:
        raise typer.BadParameter("--timeout must be greater than zero")
    if test_timeout is not None and test_timeout <= 0:
        raise typer.BadParameter("--test-timeout must be greater than zero")

    if times == 0:
        logger.warning("--times is 0; no tests will be executed")
    if test_timeout is not None and test_timeout >= timeout:
        logger.warning(
            "--test-timeout (%ss) is not below --timeout (%ss); the global watchdog will fire first",
            test_timeout, timeout,
        )


def resolve_config(
    auth_config: str | None = None,
    cert_dir: str | None = None,
    host: str | None = None,
    repo_root: Path | None = None,
    provider: str | None = None,
    kubeconfig: str | None = None,
    context: str | None = None,
    namespace: str | None = None,
) -> RunConfig:
    """Merge CLI overrides, environment variables, and defaults into a RunConfig.

    Resolution priority: CLI arguments > E2E_* environment variables > defaults.

    Args:
        auth_config: CLI override for the auth file, or None.
        cert_dir: CLI override for the certificate directory, or None.
        host: CLI override for the API server address, or None.
        repo_root: CLI override for the asset root, or None.
        provider: CLI override for the provider identity, or None.
        kubeconfig: CLI override for the kubeconfig path, or None.
        context: CLI override for the kubeconfig context, or None.
        namespace: CLI override for the test namespace, or None.

    Returns:
        The resolved, frozen RunConfig.
    """
    cfg = RunConfig()
    overrides = {
        key: value
        for key, value in {
            "auth_config": auth_config,
            "cert_dir": cert_dir,
            "host": host,
            "repo_root": repo_root,
            "provider": provider,
            "kubeconfig": kubeconfig,
            "context": context,
            "namespace": namespace,
        }.items()
        if value is not None
    }
    if overrides:
        cfg = cfg.model_copy(update=overrides)
    return cfg


# ============================================================================
# Display
# ============================================================================

def display_config(cfg: RunConfig, options: DriverOptions) -> None:
    """Print the resolved connection config and driver options.

    Args:
        cfg: Resolved run configuration.
        options: Resolved driver options.
    """
    console.print(Panel.fit("Configuration", style="bold blue"))

    console.print("[yellow]Cluster:[/yellow]")
    console.print(f"  host            : {cfg.host or '(from kubeconfig)'}")
    console.print(f"  kubeconfig      : {cfg.kubeconfig or cfg.auth_config or '(default)'}")
    console.print(f"  context         : {cfg.context or '(current)'}")
    console.print(f"  namespace       : {cfg.namespace}")
    console.print(f"  provider        : {cfg.provider or '(unset)'}")
    console.print(f"  repo_root       : {cfg.repo_root}")

    console.print("[yellow]Run:[/yellow]")
    console.print(f"  tests           : {', '.join(options.tests) or '(all)'}")
    console.print(f"  times           : {options.times}")
    console.print(f"  orderseed       : {options.orderseed or '(from clock)'}")
    console.print(f"  timeout         : {options.timeout}s")
    console.print(f"  test_timeout    : {f'{options.test_timeout}s' if options.test_timeout else '(none)'}")
