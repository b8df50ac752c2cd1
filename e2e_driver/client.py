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

"""kubectl-backed cluster client used by test bodies."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

from e2e_driver import logger
from e2e_driver.config import RunConfig
from e2e_driver.constants import CA_CERT_FILE
from e2e_driver.utils import run_kubectl


class ClusterError(RuntimeError):
    """A cluster operation failed or returned something unparsable."""


class ClusterClient(Protocol):
    """Operations a test body may perform against the cluster."""

    def create_pod(self, manifest: dict[str, Any]) -> dict[str, Any]: ...

    def get_pod(self, name: str) -> dict[str, Any]: ...

    def delete_pod(self, name: str) -> None: ...


def connection_args(cfg: RunConfig) -> list[str]:
    """Build the kubectl global flags selecting cluster, credentials, and namespace.

    Args:
        cfg: Run configuration with connection parameters.

    Returns:
        List of kubectl arguments to prepend to every command.
    """
    args: list[str] = []
    kubeconfig = cfg.kubeconfig or cfg.auth_config
    if kubeconfig:
        args += ["--kubeconfig", kubeconfig]
    if cfg.context:
        args += ["--context", cfg.context]
    if cfg.host:
        args += ["--server", cfg.host]
    if cfg.cert_dir:
        args += ["--certificate-authority", str(Path(cfg.cert_dir) / CA_CERT_FILE)]
    args += ["--namespace", cfg.namespace]
    return args


def restart_count(pod: dict[str, Any], container: str) -> int:
    """Read the restart counter of ``container`` from a pod's status.

    Args:
        pod: Pod object as returned by ``kubectl get -o json``.
        container: Container name to look up.

    Returns:
        The container's restart count, or 0 if it has no status yet.
    """
    statuses = pod.get("status", {}).get("containerStatuses") or []
    for status in statuses:
        if status.get("name") == container:
            return int(status.get("restartCount", 0))
    logger.debug("Pod %s has no status for container %s yet", pod.get("metadata", {}).get("name", "<unknown>"), container)
    return 0


def pod_phase(pod: dict[str, Any]) -> str:
    """Return the pod's ``status.phase`` (empty string if absent)."""
    return pod.get("status", {}).get("phase", "")


class KubectlClient:
    """Cluster client that shells out to kubectl for each operation."""

    def __init__(self, cfg: RunConfig) -> None:
        self._cfg = cfg
        self._base_args = connection_args(cfg)

    def _kubectl(self, args: list[str], input_text: str | None = None) -> str:
        ok, stdout, stderr = run_kubectl(
            [*self._base_args, *args],
            timeout=self._cfg.kubectl_timeout,
            input_text=input_text,
        )
        if not ok:
            raise ClusterError(f"kubectl {args[0]} failed: {stderr.strip()[:200]}")
        return stdout

    def _kubectl_json(self, args: list[str], input_text: str | None = None) -> dict[str, Any]:
        stdout = self._kubectl(args, input_text=input_text)
        try:
            return json.loads(stdout)
        except json.JSONDecodeError as err:
            raise ClusterError(f"kubectl {args[0]} returned invalid JSON: {err}") from err

    def create_pod(self, manifest: dict[str, Any]) -> dict[str, Any]:
        """Create a pod from ``manifest`` and return the stored object."""
        return self._kubectl_json(["create", "-f", "-", "-o", "json"], input_text=json.dumps(manifest))

    def get_pod(self, name: str) -> dict[str, Any]:
        """Fetch the current state of pod ``name``."""
        return self._kubectl_json(["get", "pod", name, "-o", "json"])

    def delete_pod(self, name: str) -> None:
        """Delete pod ``name``; a pod that is already gone is not an error."""
        self._kubectl(["delete", "pod", name, "--ignore-not-found", "--wait=false"])
        logger.info("Deleted pod %s", name)
