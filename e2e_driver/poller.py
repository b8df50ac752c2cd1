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

"""Fixed-interval polling of external state."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TypeVar

from tenacity import (
    RetryError,
    RetryCallState,
    Retrying,
    retry_if_result,
    stop_after_attempt,
    stop_never,
    wait_fixed,
)

from e2e_driver import logger
from e2e_driver.models import PollAttempt

T = TypeVar("T")


def poll_until(
    sample: Callable[[], T],
    predicate: Callable[[T, T], bool],
    baseline: T,
    interval: float,
    max_attempts: int,
    *,
    sleep: Callable[[float], None] = time.sleep,
    on_attempt: Callable[[PollAttempt], None] | None = None,
) -> bool:
    """Sample until ``predicate(baseline, sample())`` holds or the budget runs out.

    Every attempt sleeps ``interval`` first, then samples. Success returns at
    once without using the remaining attempts. A sample that raises ends the
    poll with failure; it is not retried.

    Args:
        sample: Fetches the current value from the external system.
        predicate: Compares the baseline with the latest sample.
        baseline: Value observed before polling began.
        interval: Seconds to sleep before each sample.
        max_attempts: Maximum number of samples to take.
        sleep: Sleep function, injectable for tests.
        on_attempt: Observer called with every PollAttempt.

    Returns:
        True if the predicate held within ``max_attempts`` samples.

    Raises:
        ValueError: If ``max_attempts`` is less than 1.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

    started = time.monotonic()

    def _attempt(attempt_index: int) -> bool:
        sleep(interval)
        value = sample()
        attempt = PollAttempt(attempt_index, value, time.monotonic() - started)
        logger.debug("Poll attempt %d/%d observed %r", attempt_index, max_attempts, value)
        if on_attempt is not None:
            on_attempt(attempt)
        return predicate(baseline, value)

    retrying = Retrying(
        stop=stop_after_attempt(max_attempts),
        retry=retry_if_result(lambda ok: not ok),
    )
    try:
        for attempt in retrying:
            with attempt:
                ok = _attempt(attempt.retry_state.attempt_number)
            if not attempt.retry_state.outcome.failed:
                attempt.retry_state.set_result(ok)
    except RetryError:
        return False
    except Exception as err:
        logger.error("Polling aborted: sampling failed: %s", err)
        return False
    return True


def _log_wait(describe: str) -> Callable[[RetryCallState], None]:
    def _before_sleep(retry_state: RetryCallState) -> None:
        logger.info(
            "Waiting for %s (attempt %d, last observed %r)",
            describe, retry_state.attempt_number, retry_state.outcome.result(),
        )
    return _before_sleep


def wait_until(
    sample: Callable[[], T],
    done: Callable[[T], bool],
    interval: float,
    *,
    describe: str = "condition",
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Sample every ``interval`` seconds with no attempt limit until ``done``.

    Each miss is logged; the run-wide watchdog bounds the total wait.
    Sampling errors propagate to the caller.

    Returns:
        The first sampled value for which ``done`` is true.
    """
    retrying = Retrying(
        stop=stop_never,
        wait=wait_fixed(interval),
        retry=retry_if_result(lambda value: not done(value)),
        before_sleep=_log_wait(describe),
        sleep=sleep,
        reraise=True,
    )
    return retrying(sample)
