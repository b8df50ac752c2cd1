#!/usr/bin/env python3
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

"""
cli.py - Randomized end-to-end test driver for a live Kubernetes cluster.

Subcommands:
    run    Schedule, execute, and report the registered checks (TAP on stdout)
    list   Print the registered checks in their base order

Environment Variables:
    Connection settings can be supplied via E2E_* environment variables:
    - E2E_HOST, E2E_KUBECONFIG, E2E_CONTEXT, E2E_NAMESPACE (default: default)
    - E2E_AUTH_CONFIG, E2E_CERT_DIR, E2E_PROVIDER, E2E_REPO_ROOT
    - E2E_KUBECTL_TIMEOUT (default: 30)
    - E2E_SKIP_PREREQ_CHECK=true behaves like --skip-prereq-check

Examples:
    # Run every check once in a random order
    e2e-driver run

    # Reproduce a previous order
    e2e-driver run --orderseed 0x5f3a91c2

    # Run one check five times with a per-test deadline
    e2e-driver run -t TestLivenessExec --times 5 --test-timeout 300
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer

from e2e_driver import console, logger
from e2e_driver.checks import REGISTRY
from e2e_driver.config import DriverOptions, display_config, resolve_config, validate_options
from e2e_driver.constants import DEFAULT_REPEAT_COUNT, DEFAULT_RUN_TIMEOUT_SECONDS, FAILED_EXIT_CODE
from e2e_driver.runner import run_e2e_tests
from e2e_driver.utils import require_command, resolve_bool_flag

app = typer.Typer(
    help="Randomized end-to-end test driver for Kubernetes clusters.",
    no_args_is_help=True,
)


def _parse_seed(value: str) -> int:
    """Accept decimal or 0x-prefixed hex, matching how seeds are logged."""
    try:
        return int(value, 0)
    except ValueError as err:
        raise typer.BadParameter(f"invalid orderseed {value!r}") from err


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all subcommands."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


@app.command("run")
def run_cmd(
    tests: list[str] | None = typer.Option(
        None, "--test", "-t", help="Test to run; repeat to select several (default: all)"),
    times: int = typer.Option(
        DEFAULT_REPEAT_COUNT, "--times", help="Number of times to repeat the selected tests"),
    orderseed: str = typer.Option(
        "0", "--orderseed", help="Shuffle seed, decimal or 0x hex; 0 derives one from the clock"),
    timeout: float = typer.Option(
        DEFAULT_RUN_TIMEOUT_SECONDS, "--timeout", help="Seconds before the whole run is aborted"),
    test_timeout: float | None = typer.Option(
        None, "--test-timeout", help="Seconds a single test may run before it is marked failed"),
    auth_config: str | None = typer.Option(
        None, "--auth-config", help="Auth file for the API server (kubeconfig format)"),
    cert_dir: str | None = typer.Option(
        None, "--cert-dir", help="Directory containing ca.crt for the API server"),
    host: str | None = typer.Option(
        None, "--host", help="Kubernetes API server address"),
    repo_root: Path | None = typer.Option(
        None, "--repo-root", help="Root directory holding examples/ test assets"),
    provider: str | None = typer.Option(
        None, "--provider", help="Cloud provider the cluster runs on"),
    kubeconfig: str | None = typer.Option(
        None, "--kubeconfig", help="kubeconfig file (overrides E2E_KUBECONFIG)"),
    context: str | None = typer.Option(
        None, "--context", help="kubeconfig context to use"),
    namespace: str | None = typer.Option(
        None, "--namespace", "-n", help="Namespace for test resources (default: default)"),
    skip_prereq_check: bool = typer.Option(
        False, "--skip-prereq-check", help="Do not check that kubectl is on PATH"),
) -> None:
    """Run the registered checks and print a TAP summary on stdout.

    Exits 0 when every test passed, 1 when any failed, and 2 when the
    run-wide timeout fires.
    """
    skip_prereq_check = resolve_bool_flag("skip_prereq_check", skip_prereq_check)
    validate_options(times, timeout, test_timeout)

    cfg = resolve_config(
        auth_config=auth_config,
        cert_dir=cert_dir,
        host=host,
        repo_root=repo_root,
        provider=provider,
        kubeconfig=kubeconfig,
        context=context,
        namespace=namespace,
    )
    options = DriverOptions(
        tests=tuple(tests or ()),
        times=times,
        orderseed=_parse_seed(orderseed),
        timeout=timeout,
        test_timeout=test_timeout,
    )
    display_config(cfg, options)

    if not skip_prereq_check:
        require_command("kubectl")

    if not run_e2e_tests(REGISTRY, cfg, options):
        logger.critical("At least one test failed")
        raise typer.Exit(code=FAILED_EXIT_CODE)


@app.command("list")
def list_cmd() -> None:
    """Print registered test names, one per line, in base order."""
    for spec in REGISTRY:
        typer.echo(spec.name)


def main() -> None:
    """Console entry point; reports unexpected errors in red and exits 1."""
    try:
        app()
    except Exception as e:
        console.print(f"[red]\u274c {e}[/red]")
        sys.exit(FAILED_EXIT_CODE)


if __name__ == "__main__":
    main()
