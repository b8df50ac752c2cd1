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

"""Sequential execution of scheduled tests with per-test cleanup."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Sequence
from contextlib import ExitStack
from typing import Any

from e2e_driver import logger
from e2e_driver.client import ClusterClient
from e2e_driver.config import RunConfig
from e2e_driver.models import TestOutcome, TestSpec

ClientFactory = Callable[[], ClusterClient]


class TestAbandonedError(RuntimeError):
    """Raised inside a body that kept running after its deadline."""


class TestContext:
    """Per-test handle giving a body the run config and a cleanup scope.

    Cleanups registered with ``defer`` run in LIFO order as soon as the body
    returns, raises, or misses its deadline. Once the context is closed, a
    late ``defer`` runs its cleanup immediately.
    """

    __test__ = False

    def __init__(self, config: RunConfig, name: str, stack: ExitStack) -> None:
        self.config = config
        self.name = name
        self._stack = stack
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        """True once the driver has moved past this test."""
        return self._closed

    def close(self) -> None:
        """Stop accepting cleanups into the scope; later ones run at once."""
        with self._lock:
            self._closed = True

    def ensure_open(self) -> None:
        """Raise TestAbandonedError if the driver has moved past this test.

        Long-running bodies call this between cluster round trips.
        """
        if self._closed:
            raise TestAbandonedError(f"test {self.name} was abandoned after its deadline")

    def defer(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        """Register ``fn(*args, **kwargs)`` to run when the test finishes.

        A failing cleanup is logged and does not affect the verdict or the
        remaining cleanups.
        """
        label = getattr(fn, "__name__", repr(fn))

        def _cleanup() -> None:
            try:
                fn(*args, **kwargs)
            except Exception as err:
                logger.warning("Cleanup %s for %s failed: %s", label, self.name, err)

        with self._lock:
            if not self._closed:
                self._stack.callback(_cleanup)
                return
        logger.warning("Test %s registered cleanup %s after its deadline; running it now", self.name, label)
        _cleanup()


def _invoke(spec: TestSpec, client: ClusterClient, ctx: TestContext) -> bool:
    """Call the body and coerce its verdict; an escaped exception is a failure."""
    try:
        return bool(spec.body(client, ctx))
    except TestAbandonedError as err:
        logger.info("%s", err)
        return False
    except Exception:
        logger.exception("Test %s raised an unexpected error", spec.name)
        return False


def _invoke_with_deadline(
    spec: TestSpec,
    client: ClusterClient,
    ctx: TestContext,
    deadline: float,
) -> tuple[bool, bool]:
    """Run the body on a daemon thread and wait at most ``deadline`` seconds.

    Returns:
        Tuple of (passed, timed_out). A stalled body is abandoned, not killed.
    """
    verdict: list[bool] = []
    worker = threading.Thread(
        target=lambda: verdict.append(_invoke(spec, client, ctx)),
        name=f"e2e-test-{spec.name}",
        daemon=True,
    )
    worker.start()
    worker.join(deadline)
    if worker.is_alive():
        logger.error("Test %s stalled: no verdict after %ss", spec.name, deadline)
        return False, True
    return bool(verdict and verdict[0]), False


def run_test(
    index: int,
    spec: TestSpec,
    client_factory: ClientFactory,
    config: RunConfig,
    *,
    test_timeout: float | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> TestOutcome:
    """Execute one test against a freshly created client.

    Args:
        index: 1-based position of the test in the run, for logging.
        spec: Test to execute.
        client_factory: Callable producing a new client handle.
        config: Read-only run configuration handed to the body.
        test_timeout: Per-test deadline in seconds, or None.
        clock: Monotonic clock used for the duration.

    Returns:
        The recorded TestOutcome.
    """
    logger.info("Running test %d %s", index, spec.name)
    started = clock()
    timed_out = False
    try:
        # Fresh client per test.
        client = client_factory()
    except Exception:
        logger.exception("Test %s could not get a cluster client", spec.name)
        passed = False
    else:
        with ExitStack() as stack:
            ctx = TestContext(config, spec.name, stack)
            try:
                if test_timeout is None:
                    passed = _invoke(spec, client, ctx)
                else:
                    passed, timed_out = _invoke_with_deadline(spec, client, ctx, test_timeout)
            finally:
                ctx.close()
    duration = clock() - started

    if passed:
        logger.info("        test %d passed", index)
    else:
        logger.info("        test %d failed", index)
    return TestOutcome(spec=spec, passed=passed, duration=duration, timed_out=timed_out)


def run_tests(
    sequence: Sequence[TestSpec],
    client_factory: ClientFactory,
    config: RunConfig,
    *,
    test_timeout: float | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> list[TestOutcome]:
    """Run every scheduled test in order, never stopping on a failure.

    Args:
        sequence: Scheduled tests; read-only once execution begins.
        client_factory: Callable producing a new client handle per test.
        config: Read-only run configuration handed to every body.
        test_timeout: Per-test deadline in seconds, or None.
        clock: Monotonic clock used for durations.

    Returns:
        One TestOutcome per scheduled test, in scheduled order.
    """
    outcomes: list[TestOutcome] = []
    for i, spec in enumerate(sequence, start=1):
        outcomes.append(
            run_test(i, spec, client_factory, config, test_timeout=test_timeout, clock=clock)
        )
    return outcomes


def all_passed(outcomes: Sequence[TestOutcome]) -> bool:
    """Return True only if every outcome passed."""
    return all(outcome.passed for outcome in outcomes)
