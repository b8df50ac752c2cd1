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

"""Utility functions for kubectl, command checks, and flag resolution."""

from __future__ import annotations

import os
import subprocess
import uuid

import sh


def require_command(cmd: str) -> None:
    """Check if a command exists on the system PATH.

    Args:
        cmd: Name of the CLI command to check.

    Raises:
        RuntimeError: If the command is not found.
    """
    try:
        sh.which(cmd)
    except sh.ErrorReturnCode as err:
        raise RuntimeError(f"Required command '{cmd}' not found. Please install it first.") from err


def run_kubectl(
    args: list[str],
    timeout: int = 30,
    input_text: str | None = None,
) -> tuple[bool, str, str]:
    """Run a kubectl command via subprocess and return (success, stdout, stderr).

    Uses subprocess instead of sh because callers parse stdout as JSON and
    need it kept apart from stderr.

    Args:
        args: kubectl arguments (e.g. ``["get", "pod", "web", "-o", "json"]``).
        timeout: Maximum seconds to wait for the command to complete.
        input_text: Text fed to kubectl's stdin, e.g. a manifest for ``-f -``.

    Returns:
        Tuple of (success, stdout, stderr).
    """
    try:
        result = subprocess.run(
            ["kubectl", *args],
            capture_output=True,
            text=True,
            timeout=timeout,
            input=input_text,
        )
        return result.returncode == 0, result.stdout, result.stderr
    except (subprocess.SubprocessError, OSError) as exc:
        return False, "", str(exc)


def new_uid() -> str:
    """Return a random UUID string for unique resource names."""
    return str(uuid.uuid4())


def resolve_bool_flag(name: str, cli_value: bool) -> bool:
    """Let an ``E2E_<NAME>`` environment variable switch a boolean flag on.

    Args:
        name: Flag name in snake_case (e.g. ``skip_prereq_check``).
        cli_value: Value parsed from the command line.

    Returns:
        True if the CLI flag was set or the env var holds a truthy value.
    """
    if cli_value:
        return True
    env_value = os.environ.get(f"E2E_{name.upper()}", "")
    return env_value.strip().lower() in ("1", "true", "yes", "on")
