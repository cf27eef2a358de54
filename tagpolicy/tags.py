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

"""Tag selection for tagpolicy.

Given the tags published for an image (fetched by some registry client
outside this package), pick the one worth upgrading to, or the lowest
stable one. Tags that do not parse are skipped and logged at debug level;
one bad tag in a long list never stops the scan. Partial versions are
accepted here ("1.2" reads as 1.2.0), as they are for the current version.

Example:
    from tagpolicy.tags import find_newest, find_lowest

    find_newest("1.2.3", ["1.2.4", "nightly", "1.3.0"], False)  # ("1.3.0", True)
    find_lowest(["5.0.0", "1.0.0-rc.1", "3.0.0"])               # "3.0.0"

"""

from __future__ import annotations

from collections.abc import Iterable

from tagpolicy.exceptions import VersionError
from tagpolicy.logging import Logger, resolve_logger
from tagpolicy.versioning import Version, parse_version_lenient


def _parse_tags(tags: Iterable[str], log: Logger) -> list[Version]:
    versions: list[Version] = []
    for tag in tags:
        try:
            versions.append(parse_version_lenient(tag, logger=log))
        except VersionError as err:
            log.debug("TAGS", f"skipping tag {tag!r}: {err}")
    return versions


def find_highest(
    tags: Iterable[str],
    *,
    pre_release: str | None = None,
    logger: Logger | None = None,
) -> Version | None:
    """Return the highest parseable tag.

    Args:
        tags: Candidate tag strings.
        pre_release: If given, only tags on this pre-release channel count
            ("" means stable only).
        logger: Optional logger; defaults to the global logger.

    Returns:
        The highest Version, or None if no tag qualifies. When several tags
        are equal by precedence (e.g., "1.0.0" and "v1.0.0") the first one
        in ``tags`` wins.
    """
    log = resolve_logger(logger)
    versions = _parse_tags(tags, log)
    if pre_release is not None:
        versions = [v for v in versions if v.pre_release == pre_release]
    if not versions:
        log.debug("TAGS", "no versions available")
        return None
    # sorted() is stable, so equal versions keep their input order
    return sorted(versions, reverse=True, key=lambda v: v.precedence_key)[0]


def find_newest(
    current: str,
    tags: Iterable[str],
    match_pre_release: bool,
    *,
    logger: Logger | None = None,
) -> tuple[str, bool]:
    """Find a tag newer than the current version.

    Args:
        current: Currently deployed version.
        tags: Candidate tag strings.
        match_pre_release: If True, only consider tags on the same
            pre-release channel as ``current``.
        logger: Optional logger; defaults to the global logger.

    Returns:
        ``(tag, True)`` with the tag exactly as listed when the highest
        candidate is strictly newer than ``current``; ``("", False)`` otherwise.

    Raises:
        VersionError: If ``current`` itself does not parse.
    """
    log = resolve_logger(logger)
    current_version = parse_version_lenient(current, logger=log)

    tags = list(tags)
    if not tags:
        return "", False

    channel = current_version.pre_release if match_pre_release else None
    highest = find_highest(tags, pre_release=channel, logger=log)
    if highest is None:
        return "", False

    if current_version < highest:
        log.debug(
            "TAGS",
            f"latest available {highest.original!r} is newer than current {current!r}",
        )
        return highest.original, True

    log.debug(
        "TAGS",
        f"latest available {highest.original!r} is not newer than current {current!r}",
    )
    return "", False


def find_lowest(tags: Iterable[str], *, logger: Logger | None = None) -> str:
    """Return the lowest stable tag in canonical form, or "" if there is none.

    Pre-release tags never qualify. The result is ``str(Version)``, so
    "v1.0.0" comes back as "1.0.0".
    """
    log = resolve_logger(logger)
    stable = [v for v in _parse_tags(tags, log) if v.is_stable]
    if not stable:
        log.debug("TAGS", "no stable versions available")
        return ""
    return str(min(stable, key=lambda v: v.precedence_key))
