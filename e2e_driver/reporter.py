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

"""Test Anything Protocol (TAP) summary output.

See http://testanything.org/ for the format.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import TextIO

from e2e_driver.models import TestOutcome


def render_tap(outcomes: Sequence[TestOutcome]) -> list[str]:
    """Render outcomes as TAP lines: a ``1..N`` plan, then one line per outcome.

    Args:
        outcomes: Outcomes in recorded order; repeated names are kept as-is.

    Returns:
        TAP lines without trailing newlines.
    """
    lines = [f"1..{len(outcomes)}"]
    for i, outcome in enumerate(outcomes, start=1):
        status = "ok" if outcome.passed else "not ok"
        lines.append(f"{status} {i} - {outcome.name}")
    return lines


def report(outcomes: Sequence[TestOutcome], stream: TextIO | None = None) -> None:
    """Write the TAP summary to ``stream`` (stdout by default)."""
    out = stream if stream is not None else sys.stdout
    for line in render_tap(outcomes):
        out.write(line + "\n")
    out.flush()
