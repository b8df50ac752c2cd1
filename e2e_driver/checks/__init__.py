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

"""Registry of end-to-end checks in their base (pre-shuffle) order."""

from __future__ import annotations

from e2e_driver.checks.liveness import check_liveness_exec, check_liveness_http
from e2e_driver.models import TestSpec

REGISTRY: tuple[TestSpec, ...] = (
    TestSpec("TestLivenessHttp", check_liveness_http),
    TestSpec("TestLivenessExec", check_liveness_exec),
)
