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

"""Top-level workflow: schedule, arm the watchdog, execute, report."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TextIO

from rich.panel import Panel

from e2e_driver import console, logger
from e2e_driver.client import KubectlClient
from e2e_driver.config import DriverOptions, RunConfig
from e2e_driver.engine import ClientFactory, all_passed, run_tests
from e2e_driver.models import TestOutcome, TestSpec
from e2e_driver.reporter import report
from e2e_driver.scheduler import schedule
from e2e_driver.watchdog import start_watchdog


def kubectl_client_factory(cfg: RunConfig) -> ClientFactory:
    """Return a factory that builds a new KubectlClient on every call."""
    return lambda: KubectlClient(cfg)


def run_e2e_tests(
    registry: Sequence[TestSpec],
    cfg: RunConfig,
    options: DriverOptions,
    *,
    client_factory: ClientFactory | None = None,
    stream: TextIO | None = None,
    watchdog: Callable[..., Callable[[], None]] = start_watchdog,
) -> bool:
    """Run the scheduled suite once and emit the TAP summary.

    The watchdog is armed before scheduling and stays armed until the
    report has been written.

    Args:
        registry: Registered tests in their base order.
        cfg: Read-only run configuration passed to every test.
        options: Filter, repeat count, seed, and timeouts.
        client_factory: Per-test client factory; kubectl-backed by default.
        stream: Destination for the TAP report, stdout by default.
        watchdog: Function arming the run-wide timer.

    Returns:
        True if every executed test passed.
    """
    cancel_watchdog = watchdog(options.timeout)
    try:
        result = schedule(registry, options.tests, options.times, options.orderseed)
        console.print(Panel.fit(
            f"Running {len(result.tests)} tests (orderseed {result.seed:#x})", style="bold blue",
        ))

        factory = client_factory or kubectl_client_factory(cfg)
        outcomes: list[TestOutcome] = run_tests(
            result.tests, factory, cfg, test_timeout=options.test_timeout,
        )
        report(outcomes, stream)
    finally:
        cancel_watchdog()

    passed = all_passed(outcomes)
    if passed:
        logger.info("All tests pass")
        console.print("[green]\u2705 All tests pass[/green]")
    else:
        failed = sum(1 for outcome in outcomes if not outcome.passed)
        console.print(f"[red]\u274c {failed} of {len(outcomes)} tests failed (orderseed {result.seed:#x})[/red]")
    return passed
