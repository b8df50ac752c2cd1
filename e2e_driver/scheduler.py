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

"""Test selection, repetition, and seeded shuffling."""

from __future__ import annotations

import random
import time
from collections.abc import Callable, Iterable, Sequence

from e2e_driver import logger
from e2e_driver.constants import SEED_MASK
from e2e_driver.models import ScheduleResult, TestSpec


def shuffle_tests(tests: list[TestSpec], rng: random.Random) -> None:
    """Fisher-Yates shuffle of ``tests`` in place.

    Args:
        tests: Sequence to permute.
        rng: Seeded random source driving the permutation.
    """
    for i in range(len(tests) - 1, 0, -1):
        j = rng.randint(0, i)
        tests[i], tests[j] = tests[j], tests[i]


def filter_tests(all_tests: Sequence[TestSpec], name_filter: Iterable[str]) -> tuple[list[TestSpec], list[str]]:
    """Keep only the tests named in ``name_filter``, preserving registry order.

    An empty filter keeps everything. Each requested name that is not
    registered is warned about once and dropped.

    Args:
        all_tests: Registered tests in their base order.
        name_filter: Requested test names.

    Returns:
        Tuple of (selected_tests, unknown_names).
    """
    requested = list(dict.fromkeys(name_filter))
    if not requested:
        return list(all_tests), []

    valid_names = {test.name for test in all_tests}
    run_names: set[str] = set()
    unknown: list[str] = []
    for name in requested:
        if name in valid_names:
            run_names.add(name)
        else:
            logger.warning("Requested test %s does not exist", name)
            unknown.append(name)

    selected: list[TestSpec] = []
    for i, test in enumerate(all_tests):
        if test.name not in run_names:
            logger.info("Skipping test %d %s", i + 1, test.name)
            continue
        selected.append(test)
    return selected, unknown


def resolve_seed(seed: int, clock: Callable[[], int] = time.time_ns) -> int:
    """Return ``seed`` unchanged, or the low 32 bits of the clock when it is 0."""
    if seed:
        return seed
    return clock() & SEED_MASK


def schedule(
    all_tests: Sequence[TestSpec],
    name_filter: Iterable[str] = (),
    repeat_count: int = 1,
    seed: int = 0,
    *,
    clock: Callable[[], int] = time.time_ns,
) -> ScheduleResult:
    """Build the final execution order: filter, repeat, then shuffle.

    Args:
        all_tests: Registered tests in their base order.
        name_filter: Names to run; empty runs every registered test.
        repeat_count: Number of times the selected list is concatenated.
        seed: Shuffle seed, or 0 to derive one from ``clock``.
        clock: Nanosecond clock used when no seed is supplied.

    Returns:
        ScheduleResult with the frozen order and the effective seed.

    Raises:
        ValueError: If ``repeat_count`` is negative.
    """
    if repeat_count < 0:
        raise ValueError(f"repeat_count must be >= 0, got {repeat_count}")

    tests, unknown = filter_tests(all_tests, name_filter)
    if repeat_count != 1:
        tests = tests * repeat_count

    effective_seed = resolve_seed(seed, clock)
    shuffle_tests(tests, random.Random(effective_seed))
    logger.info("Tests shuffled with orderseed %#x", effective_seed)

    return ScheduleResult(tests=tuple(tests), seed=effective_seed, unknown=tuple(unknown))
