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

"""Liveness probe checks, over HTTP and via exec.

The pods come from the descriptions in ``examples/liveness`` under the
configured repo root. Each check passes once the kubelet restarts the
probed container at least once.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from e2e_driver import logger
from e2e_driver.client import ClusterClient, ClusterError, pod_phase, restart_count
from e2e_driver.constants import (
    LIVENESS_CONTAINER,
    LIVENESS_POLL_INTERVAL_SECONDS,
    LIVENESS_POLL_MAX_ATTEMPTS,
    POD_PHASE_PENDING,
    POD_START_POLL_INTERVAL_SECONDS,
)
from e2e_driver.engine import TestContext
from e2e_driver.loader import LoaderError, asset_path, load_pod
from e2e_driver.poller import poll_until, wait_until
from e2e_driver.utils import new_uid


def wait_for_pod_not_pending(
    client: ClusterClient,
    pod_name: str,
    sleep: Callable[[float], None] = time.sleep,
    ctx: TestContext | None = None,
) -> bool:
    """Wait until the pod leaves ``Pending``.

    Any other phase ends the wait, so a pod that goes straight to a terminal
    phase cannot block forever. With ``ctx`` given, the wait stops with
    TestAbandonedError once the test's deadline has passed.

    Returns:
        True once the pod is no longer pending, False if fetching it failed.
    """
    def _phase() -> str:
        if ctx is not None:
            ctx.ensure_open()
        return pod_phase(client.get_pod(pod_name))

    try:
        wait_until(
            _phase,
            lambda phase: phase != POD_PHASE_PENDING,
            POD_START_POLL_INTERVAL_SECONDS,
            describe=f"pod {pod_name} to leave {POD_PHASE_PENDING}",
            sleep=sleep,
        )
    except ClusterError as err:
        logger.error("Get pod %s failed: %s", pod_name, err)
        return False
    return True


def run_liveness_test(
    client: ClusterClient,
    ctx: TestContext,
    yaml_file_name: str,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Create a liveness pod and wait for its container to be restarted.

    Args:
        client: Fresh cluster client for this test.
        ctx: Test context providing config and cleanup registration.
        yaml_file_name: Pod description under ``examples/liveness``.
        sleep: Sleep function, injectable for tests.

    Returns:
        True if the restart count increased within the polling budget.
    """
    try:
        pod = load_pod(asset_path(ctx.config.repo_root, "examples", "liveness", yaml_file_name))
    except LoaderError as err:
        logger.error("%s", err)
        return False

    # Unique per run; templates share a base name.
    pod_name = f"{pod['metadata']['name']}-{new_uid()}"
    pod["metadata"]["name"] = pod_name

    ctx.ensure_open()
    logger.info("Creating pod %s", pod_name)
    try:
        client.create_pod(pod)
    except ClusterError as err:
        logger.error("Failed to create pod %s: %s", pod_name, err)
        return False
    ctx.defer(client.delete_pod, pod_name)

    if not wait_for_pod_not_pending(client, pod_name, sleep=sleep, ctx=ctx):
        logger.info("Failed to start pod %s", pod_name)
        return False
    logger.info("Started pod %s", pod_name)

    try:
        initial = restart_count(client.get_pod(pod_name), LIVENESS_CONTAINER)
    except ClusterError as err:
        logger.error("Get pod %s failed: %s", pod_name, err)
        return False
    logger.info("Initial restart count of pod %s is %d", pod_name, initial)

    def _sample() -> int:
        ctx.ensure_open()
        count = restart_count(client.get_pod(pod_name), LIVENESS_CONTAINER)
        logger.info("Restart count of pod %s is now %d", pod_name, count)
        return count

    restarted = poll_until(
        _sample,
        lambda baseline, current: current > baseline,
        initial,
        LIVENESS_POLL_INTERVAL_SECONDS,
        LIVENESS_POLL_MAX_ATTEMPTS,
        sleep=sleep,
    )
    if restarted:
        logger.info("Restart count of pod %s increased during the test", pod_name)
    else:
        logger.error("Did not see the restart count of pod %s increase from %d during the test", pod_name, initial)
    return restarted


def check_liveness_http(client: ClusterClient, ctx: TestContext) -> bool:
    """Restarts driven by an HTTP ``/healthz`` liveness probe."""
    return run_liveness_test(client, ctx, "http-liveness.yaml")


def check_liveness_exec(client: ClusterClient, ctx: TestContext) -> bool:
    """Restarts driven by an exec ``cat /tmp/health`` liveness probe."""
    return run_liveness_test(client, ctx, "exec-liveness.yaml")
