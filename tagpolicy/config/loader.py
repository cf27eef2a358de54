# Copyright 2025 Roger Cibrian
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

"""
Watch file loading and merging for tagpolicy.

A watch file lists the images whose tags should be evaluated, the policy
for each and the candidate versions (either a list of published tags or
a single explicit candidate). Settings are layered so common values are
written once:

Configuration Layers
--------------------
1. **Organization defaults** (defaults/org.yaml)
   - Optional; found by walking upward from the watch file
   - Only its ``defaults`` mapping is used
2. **Watch file defaults** (the ``defaults`` mapping of the watch file)
   - Overrides organization defaults
3. **Image entry** (each item of ``images``)
   - Overrides both default layers

Merge Behavior
--------------
  - **Dicts**: Recursively merged (keys from overlay override base)
  - **Lists**: Completely replaced (a ``tags`` list in an entry replaces,
    never extends, a default one)
  - **Scalars**: Overwritten

Example watch file
------------------

    apiVersion: tagpolicy/v1
    defaults:
      policy: minor
      match_pre_release: true
    images:
      - image: karolis/webhook-demo:1.4.5
        tags: ["1.4.6", "1.5.0", "2.0.0"]
      - image: registry.example.com/api:20.1-9638
        policy: all
        candidate: 20.1-9700

Error Handling
--------------
- ConfigError: Missing file, YAML parse errors, empty files, invalid
  structure or unknown policy names
- All errors are chained with "from err" for better debugging
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

from tagpolicy.exceptions import ConfigError
from tagpolicy.logging import get_global_logger
from tagpolicy.policy import parse_policy_type

API_VERSION = "tagpolicy/v1"

ENTRY_DEFAULTS: dict[str, Any] = {
    "policy": "none",
    "match_pre_release": True,
    "tags": [],
    "candidate": None,
}


# -------------------------------
# YAML helpers
# -------------------------------


def _load_yaml_file(p: Path) -> Any:
    """Load a YAML file and return the parsed Python object.

    Raises:
        ConfigError: When the file does not exist, is not valid YAML, or
            is empty.
    """
    if not p.exists():
        raise ConfigError(f"file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as err:
        raise ConfigError(f"Error parsing YAML: {p}: {err}") from err
    if data is None:
        raise ConfigError(f"YAML file is empty: {p}")
    return data


def _dump_yaml(data: Any) -> list[str]:
    """Render data as YAML lines for debug output."""
    text = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    return [line for line in text.split("\n") if line.strip()]


# -------------------------------
# Merge logic
# -------------------------------


def _deep_merge_dicts(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """
    Deep-merge two dicts with "overlay wins".

    Rules:
      - dict + dict -> deep merge
      - list + list -> overlay REPLACES base (not concatenated)
      - everything else -> overlay overwrites base

    This function does not mutate inputs; returns a new dict.
    """
    result: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge_dicts(result[k], v)
        else:
            result[k] = v
    return result


def _find_org_defaults(start_dir: Path) -> Path | None:
    """Walk upward from 'start_dir' looking for 'defaults/org.yaml'."""
    for parent in [start_dir] + list(start_dir.parents):
        candidate = parent / "defaults" / "org.yaml"
        if candidate.exists():
            return candidate
    return None


# -------------------------------
# Validation
# -------------------------------


def _validate_entry(entry: dict[str, Any], index: int, path: Path) -> dict[str, Any]:
    """Check a merged image entry and return it with normalized values."""
    where = f"{path}: images[{index}]"

    image = entry.get("image")
    if not isinstance(image, str) or not image.strip():
        raise ConfigError(f"{where}: 'image' must be a non-empty string")

    policy = entry.get("policy")
    if not isinstance(policy, str):
        raise ConfigError(f"{where}: 'policy' must be a string")
    try:
        policy = str(parse_policy_type(policy))
    except ConfigError as err:
        raise ConfigError(f"{where}: {err}") from err

    if not isinstance(entry.get("match_pre_release"), bool):
        raise ConfigError(f"{where}: 'match_pre_release' must be true or false")

    tags = entry.get("tags")
    # YAML reads unquoted 1.10 as the float 1.1, so tags must be quoted
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        raise ConfigError(f"{where}: 'tags' must be a list of quoted strings")

    candidate = entry.get("candidate")
    if candidate is not None and not isinstance(candidate, str):
        raise ConfigError(f"{where}: 'candidate' must be a quoted string")

    return {
        **entry,
        "image": image.strip(),
        "policy": policy,
        "tags": list(tags),
        "candidate": candidate,
    }


# -------------------------------
# Public API
# -------------------------------


def load_watch_config(
    watch_path: Path,
    *,
    verbose: bool = False,
    debug: bool = False,
) -> dict[str, Any]:
    """
    Load a watch file and merge defaults into every image entry.

    Steps
      1) Read the watch file YAML.
      2) Find defaults/org.yaml by scanning upwards (optional).
      3) Merge: built-in -> org defaults -> watch defaults -> entry.
      4) Validate and normalize each entry.

    Returns
      A dict with ``apiVersion``, ``defaults`` (the merged default layer)
      and ``images`` (list of fully merged entries).

    Raises
      ConfigError on missing files, YAML errors or invalid structure.
    """
    logger = get_global_logger()
    watch_path = watch_path.resolve()

    if verbose:
        logger.verbose("CONFIG", f"Loading watch file: {watch_path}")

    # 1) Read watch file
    watch_obj = _load_yaml_file(watch_path)
    if not isinstance(watch_obj, dict):
        raise ConfigError(f"top-level YAML must be a mapping (dict): {watch_path}")

    api_version = watch_obj.get("apiVersion", API_VERSION)
    if api_version != API_VERSION:
        raise ConfigError(
            f"unsupported apiVersion {api_version!r} in {watch_path} "
            f"(expected {API_VERSION!r})"
        )

    # 2) Org defaults
    defaults: dict[str, Any] = copy.deepcopy(ENTRY_DEFAULTS)
    org_path = _find_org_defaults(watch_path.parent)
    if org_path is not None:
        if verbose:
            logger.verbose("CONFIG", f"Loading: {org_path}")
        org_obj = _load_yaml_file(org_path)
        if not isinstance(org_obj, dict):
            raise ConfigError(f"top-level YAML must be a mapping (dict): {org_path}")
        org_defaults = org_obj.get("defaults") or {}
        if not isinstance(org_defaults, dict):
            raise ConfigError(f"'defaults' must be a mapping: {org_path}")
        defaults = _deep_merge_dicts(defaults, org_defaults)

    # 3) Watch file defaults
    watch_defaults = watch_obj.get("defaults") or {}
    if not isinstance(watch_defaults, dict):
        raise ConfigError(f"'defaults' must be a mapping: {watch_path}")
    defaults = _deep_merge_dicts(defaults, watch_defaults)

    if debug:
        logger.debug("CONFIG", "--- Merged defaults ---")
        for line in _dump_yaml(defaults):
            logger.debug("CONFIG", line)

    images = watch_obj.get("images")
    if not isinstance(images, list):
        raise ConfigError(f"'images' must be a list: {watch_path}")

    # 4) Merge and validate entries
    merged_images: list[dict[str, Any]] = []
    for index, entry in enumerate(images):
        if not isinstance(entry, dict):
            raise ConfigError(f"{watch_path}: images[{index}] must be a mapping")
        merged_images.append(
            _validate_entry(_deep_merge_dicts(defaults, entry), index, watch_path)
        )

    if verbose:
        logger.verbose(
            "CONFIG",
            f"Loaded {len(merged_images)} image(s) from {watch_path.name}",
        )

    return {
        "apiVersion": api_version,
        "defaults": defaults,
        "images": merged_images,
    }
