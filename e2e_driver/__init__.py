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

"""e2e_driver - randomized end-to-end test driver for Kubernetes clusters."""

from __future__ import annotations

import logging

from rich.console import Console

# Progress goes to stderr so stdout carries nothing but the TAP report.
console = Console(stderr=True)
logger = logging.getLogger("e2e_driver")
