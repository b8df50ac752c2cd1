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

"""Loading of declarative resource templates used by checks."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


class LoaderError(RuntimeError):
    """A resource template is missing or malformed."""


def asset_path(repo_root: Path | str, *parts: str) -> Path:
    """Resolve a test asset relative to the configured repository root."""
    return Path(repo_root).joinpath(*parts)


def load_pod(path: Path) -> dict[str, Any]:
    """Load a pod description from a YAML file.

    Args:
        path: YAML file holding a single Pod document.

    Returns:
        The parsed pod as a dictionary.

    Raises:
        LoaderError: If the file cannot be read or has no ``metadata.name``.
    """
    try:
        with open(path) as f:
            pod = yaml.safe_load(f)
    except OSError as err:
        raise LoaderError(f"Cannot read pod description {path}: {err}") from err
    except yaml.YAMLError as err:
        raise LoaderError(f"Invalid YAML in {path}: {err}") from err

    if not isinstance(pod, dict) or not isinstance(pod.get("metadata"), dict) or not pod["metadata"].get("name"):
        raise LoaderError(f"{path} is not a pod description with metadata.name")
    return pod
