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

"""Value types passed between the scheduler, engine, and reporter."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from e2e_driver.client import ClusterClient
    from e2e_driver.engine import TestContext

TestBody = Callable[["ClusterClient", "TestContext"], bool]


@dataclass(frozen=True)
class TestSpec:
    """A named check run against a fresh client handle.

    Attributes:
        name: Human readable name, unique within the registry.
        body: Callable returning True when the check passed.
    """

    __test__ = False

    name: str
    body: TestBody


@dataclass(frozen=True)
class TestOutcome:
    """Verdict for one executed occurrence of a TestSpec.

    Attributes:
        spec: The spec that was executed.
        passed: Whether the body reported success.
        duration: Wall-clock seconds spent in the body.
        timed_out: Whether the body exceeded its per-test deadline.
    """

    __test__ = False

    spec: TestSpec
    passed: bool
    duration: float = 0.0
    timed_out: bool = False

    @property
    def name(self) -> str:
        return self.spec.name


@dataclass(frozen=True)
class ScheduleResult:
    """Final execution order plus the seed that produced it.

    Attributes:
        tests: Filtered, repeated, and shuffled sequence.
        seed: Effective seed fed to the shuffle.
        unknown: Filter names that matched no registered test.
    """

    tests: tuple[TestSpec, ...]
    seed: int
    unknown: tuple[str, ...] = ()


@dataclass(frozen=True)
class PollAttempt:
    """One sample taken by the bounded poller."""

    attempt_index: int
    observed_value: Any
    elapsed: float
