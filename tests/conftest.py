"""Shared fixtures and fakes for driver tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from e2e_driver.client import ClusterError
from e2e_driver.config import RunConfig
from e2e_driver.constants import ASSETS_DIR
from e2e_driver.models import TestSpec


class FakeCluster:
    """In-memory stand-in for KubectlClient.

    ``states`` is a script of (phase, restart_count) pairs returned by
    successive ``get_pod`` calls; the last pair repeats forever.
    """

    def __init__(
        self,
        states: list[tuple[str, int]] | None = None,
        fail_create: bool = False,
        fail_get_on: int | None = None,
        fail_delete: bool = False,
    ) -> None:
        self.states = list(states or [("Running", 0)])
        self.fail_create = fail_create
        self.fail_get_on = fail_get_on
        self.fail_delete = fail_delete
        self.created: list[dict[str, Any]] = []
        self.deleted: list[str] = []
        self.get_calls = 0

    def create_pod(self, manifest: dict[str, Any]) -> dict[str, Any]:
        if self.fail_create:
            raise ClusterError("kubectl create failed: forbidden")
        self.created.append(manifest)
        return manifest

    def get_pod(self, name: str) -> dict[str, Any]:
        self.get_calls += 1
        if self.fail_get_on is not None and self.get_calls >= self.fail_get_on:
            raise ClusterError("kubectl get failed: connection refused")
        phase, restarts = self.states.pop(0) if len(self.states) > 1 else self.states[0]
        return {
            "metadata": {"name": name},
            "status": {
                "phase": phase,
                "containerStatuses": [{"name": "liveness", "restartCount": restarts}],
            },
        }

    def delete_pod(self, name: str) -> None:
        if self.fail_delete:
            raise ClusterError("kubectl delete failed: timeout")
        self.deleted.append(name)


def make_spec(name: str, verdict: bool = True, calls: list[str] | None = None) -> TestSpec:
    """Build a TestSpec whose body records its name and returns ``verdict``."""

    def _body(client: Any, ctx: Any) -> bool:
        if calls is not None:
            calls.append(name)
        return verdict

    return TestSpec(name, _body)


def no_sleep(seconds: float) -> None:
    """Sleep replacement that returns immediately."""


@pytest.fixture
def run_config() -> RunConfig:
    """RunConfig pointing at the bundled assets."""
    return RunConfig(repo_root=ASSETS_DIR, namespace="e2e")


@pytest.fixture
def cluster_factory() -> Callable[..., FakeCluster]:
    """Factory for FakeCluster instances."""
    return FakeCluster
