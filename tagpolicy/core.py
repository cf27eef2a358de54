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

"""Core orchestration for tagpolicy.

This module ties the pieces together for one image at a time:

1. Split the image reference into repository and current tag.
2. Resolve the candidate: an explicit ``candidate`` wins, otherwise the
   newest of the listed ``tags`` that is newer than the current tag.
3. Ask the image's semver policy whether to move to the candidate.

Tag listing and the actual redeploy are left to the caller; this module
only decides.

Example:
    Evaluate a watch file:
        ```python
        from pathlib import Path
        from tagpolicy.core import evaluate_watch_file

        for decision in evaluate_watch_file(Path("watch.yaml")):
            if decision.should_update:
                print(f"{decision.image} -> {decision.target}")
        ```

    Evaluate a single entry:
        ```python
        from tagpolicy.core import evaluate_image

        decision = evaluate_image(
            {"image": "karolis/webhook-demo:1.4.5", "policy": "patch",
             "tags": ["1.4.6", "1.5.0"]}
        )
        print(decision.candidate, decision.should_update)  # 1.4.6 True
        ```
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from tagpolicy.config import load_watch_config
from tagpolicy.logging import Logger, get_global_logger
from tagpolicy.policy import SemverPolicy, parse_policy_type
from tagpolicy.results import UpdateDecision
from tagpolicy.tags import find_highest, find_newest
from tagpolicy.versioning import LATEST, split_image_reference


def _resolve_candidate(
    current: str,
    entry: dict[str, Any],
    logger: Logger,
) -> str | None:
    """Pick the version to evaluate against the current tag."""
    candidate = entry.get("candidate")
    if candidate:
        logger.verbose("CORE", f"Using explicit candidate: {candidate}")
        return candidate

    tags = entry.get("tags") or []
    if not tags:
        logger.verbose("CORE", "No candidate and no tags configured")
        return None

    if current == LATEST:
        # Nothing to compare against; offer the highest stable tag
        highest = find_highest(tags, pre_release="", logger=logger)
        return highest.original if highest is not None else None

    newest, found = find_newest(
        current,
        tags,
        bool(entry.get("match_pre_release", True)),
        logger=logger,
    )
    if not found:
        logger.verbose("CORE", f"No tag newer than {current} among {len(tags)} tag(s)")
        return None
    logger.verbose("CORE", f"Newest tag: {newest}")
    return newest


def evaluate_image(
    entry: dict[str, Any],
    *,
    logger: Logger | None = None,
) -> UpdateDecision:
    """Decide whether one watched image should be updated.

    Args:
        entry: Image entry as produced by
            :func:`tagpolicy.config.load_watch_config` (keys ``image``,
            ``policy``, and optionally ``tags``, ``candidate``,
            ``match_pre_release``).
        logger: Optional logger; defaults to the global logger.

    Returns:
        UpdateDecision for the image.

    Raises:
        VersionTagMissingError: If the image reference has no tag.
        VersionError: If the current tag or an explicit candidate does not
            parse.
        ConfigError: If the policy name is unknown.
    """
    if logger is None:
        logger = get_global_logger()

    image = entry["image"]
    policy = SemverPolicy(parse_policy_type(entry.get("policy", "none")))
    repository, current = split_image_reference(image)

    logger.verbose("CORE", f"Evaluating {image} (policy: {policy.name})")

    candidate = _resolve_candidate(current, entry, logger)
    if candidate is None:
        should_update = False
    else:
        should_update = policy.should_update(current, candidate, logger=logger)

    return UpdateDecision(
        image=image,
        repository=repository,
        current=current,
        candidate=candidate,
        policy=policy.name,
        should_update=should_update,
    )


def evaluate_watch_file(
    watch_path: Path,
    *,
    verbose: bool = False,
    debug: bool = False,
) -> list[UpdateDecision]:
    """Load a watch file and evaluate every image in it.

    Args:
        watch_path: Path to the watch file YAML.
        verbose: Show progress and decisions.
        debug: Show merged configuration and per-tag details.

    Returns:
        One UpdateDecision per image, in file order.

    Raises:
        ConfigError: On watch file problems.
        VersionError: If an image's current tag or candidate is invalid.
    """
    logger = get_global_logger()
    config = load_watch_config(watch_path, verbose=verbose, debug=debug)
    images = config["images"]

    decisions: list[UpdateDecision] = []
    for i, entry in enumerate(images, start=1):
        logger.step(i, len(images), f"Checking {entry['image']}...")
        decisions.append(evaluate_image(entry, logger=logger))
    return decisions
