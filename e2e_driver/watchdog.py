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

"""Run-wide safety timer that aborts the process."""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable

from e2e_driver import console, logger
from e2e_driver.constants import WATCHDOG_EXIT_CODE, WATCHDOG_MESSAGE


def _abort() -> None:
    """Flush logs and exit without unwinding; cluster cleanup is skipped."""
    logging.shutdown()
    os._exit(WATCHDOG_EXIT_CODE)


def start_watchdog(
    ceiling: float,
    *,
    on_timeout: Callable[[], None] | None = None,
) -> Callable[[], None]:
    """Start a timer that kills the whole run after ``ceiling`` seconds.

    The timer runs on a daemon thread and is not reset between tests. When it
    fires, nothing further is reported: no TAP summary is written.

    Args:
        ceiling: Seconds the entire run may take.
        on_timeout: Replacement for the process abort, mainly for tests.

    Returns:
        Callable that cancels the timer if it has not fired yet.
    """
    abort = on_timeout or _abort

    def _fire() -> None:
        logger.critical(WATCHDOG_MESSAGE)
        console.print(f"[red]\u274c {WATCHDOG_MESSAGE}[/red]")
        abort()

    timer = threading.Timer(ceiling, _fire)
    timer.daemon = True
    timer.name = "e2e-watchdog"
    timer.start()
    logger.info("Watchdog armed for %ss", ceiling)
    return timer.cancel
