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

"""Constants and defaults shared across the driver."""

from __future__ import annotations

from pathlib import Path

# -- Resolved paths --
PACKAGE_DIR = Path(__file__).resolve().parent
ASSETS_DIR = PACKAGE_DIR / "assets"

# -- Run-level timeouts --
DEFAULT_RUN_TIMEOUT_SECONDS = 10 * 60
WATCHDOG_EXIT_CODE = 2
FAILED_EXIT_CODE = 1
WATCHDOG_MESSAGE = "This test has timed out. Cleanup not guaranteed."

# -- Scheduling --
DEFAULT_REPEAT_COUNT = 1
SEED_MASK = (1 << 32) - 1

# -- Liveness checks --
LIVENESS_CONTAINER = "liveness"
LIVENESS_POLL_INTERVAL_SECONDS = 5
LIVENESS_POLL_MAX_ATTEMPTS = 48
POD_START_POLL_INTERVAL_SECONDS = 5
POD_PHASE_PENDING = "Pending"

# -- Cluster client --
NS_DEFAULT = "default"
DEFAULT_KUBECTL_TIMEOUT_SECONDS = 30
CA_CERT_FILE = "ca.crt"
