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

"""Semver update policy for tagpolicy.

Determines whether a candidate version should replace the currently
deployed one, based on how far apart the two versions are and the policy
mode configured for the image.

Example:
    Check if an upgrade is allowed:

        from tagpolicy.policy.semver import SemverPolicy, SemverPolicyType

        policy = SemverPolicy(SemverPolicyType.MINOR)
        policy.should_update("1.2.3", "1.5.0")  # True
        policy.should_update("1.2.3", "2.0.0")  # False, major bump

"""

from __future__ import annotations

import enum

from tagpolicy.exceptions import (
    ConfigError,
    InvalidFormatError,
    VersionError,
    VersionParseError,
)
from tagpolicy.logging import Logger, resolve_logger
from tagpolicy.versioning import (
    LATEST,
    has_major_minor_patch,
    is_pipeline_version,
    normalize,
    parse_semver,
)


class SemverPolicyType(enum.IntEnum):
    """How large a version jump may be applied automatically.

    - NONE: never update
    - ALL: any newer version, across pre-release channels
    - MAJOR: any newer version on the same channel
    - MINOR: newer versions with the same major
    - PATCH: newer versions with the same major and minor
    """

    NONE = 0
    ALL = 1
    MAJOR = 2
    MINOR = 3
    PATCH = 4

    def __str__(self) -> str:
        return self.name.lower()


def policy_type_name(spt: int) -> str:
    """Display name of a policy mode; "" for values outside the enum."""
    try:
        return str(SemverPolicyType(spt))
    except ValueError:
        return ""


def parse_policy_type(name: str) -> SemverPolicyType:
    """Look up a policy mode by its display name (case-insensitive).

    Raises:
        ConfigError: If the name is not a known policy mode.
    """
    key = name.strip().upper()
    try:
        return SemverPolicyType[key]
    except KeyError as err:
        known = ", ".join(str(t) for t in SemverPolicyType)
        raise ConfigError(f"unknown policy {name!r} (expected one of: {known})") from err


class SemverPolicy:
    """Update policy bound to one semver policy mode.

    The mode is fixed at construction and not validated: a value outside
    SemverPolicyType is accepted and simply never allows an update.
    """

    def __init__(self, spt: SemverPolicyType | int) -> None:
        self._spt = spt

    @property
    def policy_type(self) -> SemverPolicyType | int:
        return self._spt

    @property
    def name(self) -> str:
        return policy_type_name(self._spt)

    def __repr__(self) -> str:
        return f"SemverPolicy({self.name or self._spt!r})"

    def should_update(
        self, current: str, new: str, *, logger: Logger | None = None
    ) -> bool:
        """Decide whether to move from ``current`` to ``new``.

        Args:
            current: Version currently deployed, or "latest".
            new: Candidate version.
            logger: Optional logger; defaults to the global logger.

        Returns:
            True if the candidate is newer and within the policy's range.

        Raises:
            InvalidFormatError: If ``new`` has no major.minor.patch elements.
            VersionParseError: If either side is not a valid version.
        """
        return should_update(self._spt, current, new, logger=logger)


def should_update(
    spt: SemverPolicyType | int,
    current: str,
    new: str,
    *,
    logger: Logger | None = None,
) -> bool:
    """Functional form of :meth:`SemverPolicy.should_update`."""
    log = resolve_logger(logger)
    name = policy_type_name(spt) or repr(spt)

    # "latest" cannot be compared; always let it move
    if current == LATEST:
        log.verbose("POLICY", f"Current tag is {LATEST!r}, update to {new!r} allowed")
        return True

    current_normalized = normalize(current, logger=log)
    new_normalized = normalize(new, logger=log)

    if not has_major_minor_patch(new_normalized):
        raise InvalidFormatError(f"No Major.Minor.Patch elements found: {new!r}")

    try:
        current_version = parse_semver(
            current_normalized, original=current, lenient=True
        )
    except VersionError as err:
        raise VersionParseError("current", err) from err
    try:
        new_version = parse_semver(new_normalized, original=new)
    except VersionError as err:
        raise VersionParseError("new", err) from err

    # Pipeline candidates keep build/hash data in the pre-release slot, so
    # they are not held to the channel check.
    if (
        current_version.pre_release != new_version.pre_release
        and spt != SemverPolicyType.ALL
        and not is_pipeline_version(new)
    ):
        log.verbose(
            "POLICY",
            f"{name}: {current!r} -> {new!r} rejected, pre-release channel differs "
            f"({current_version.pre_release!r} vs {new_version.pre_release!r})",
        )
        return False

    if not current_version < new_version:
        log.verbose("POLICY", f"{name}: {new!r} is not newer than {current!r}")
        return False

    if spt in (SemverPolicyType.ALL, SemverPolicyType.MAJOR):
        allowed = True
    elif spt == SemverPolicyType.MINOR:
        allowed = new_version.major == current_version.major
    elif spt == SemverPolicyType.PATCH:
        allowed = (
            new_version.major == current_version.major
            and new_version.minor == current_version.minor
        )
    else:
        # NONE and unrecognized values
        allowed = False

    log.verbose(
        "POLICY",
        f"{name}: {current!r} -> {new!r} {'allowed' if allowed else 'rejected'}",
    )
    return allowed
