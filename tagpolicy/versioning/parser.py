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

"""Public version parsing API.

Turns raw tag strings and ``name:tag`` image references into
:class:`~tagpolicy.versioning.semver.Version` values. Both supported
grammars (standard semver and pipeline versions) go through the same path:
pipeline versions are normalized first, then the result must have three
dot-separated elements and be valid semver.

Example:
    Parse tags and image references:
        ```python
        from tagpolicy.versioning import parse_version, image_name_and_version

        parse_version("v1.4.5")            # Version(1, 4, 5, original="v1.4.5")
        parse_version("20.1-9638").patch   # 9638
        image_name_and_version("karolis/webhook-demo:1.4.5")
        # ("karolis/webhook-demo", Version(1, 4, 5, ...))
        ```

Note:
    The tag "latest" is not a version; ``parse_version("latest")`` raises
    InvalidFormatError. Callers that treat "latest" as a sentinel must check
    for it before parsing.
"""

from __future__ import annotations

from tagpolicy.exceptions import (
    InvalidFormatError,
    VersionError,
    VersionTagMissingError,
)
from tagpolicy.logging import Logger

from .pipeline import normalize
from .semver import Version, parse_semver

LATEST = "latest"


def has_major_minor_patch(version: str) -> bool:
    """Return True if the string splits into 3 parts on its first two dots."""
    return len(version.split(".", 2)) == 3


def parse_version(version: str, *, logger: Logger | None = None) -> Version:
    """Parse a raw version string in either supported grammar.

    Args:
        version: Raw version or tag (e.g., "1.2.3", "v0.0.824", "20.1-9638").
        logger: Optional logger; defaults to the global logger.

    Returns:
        The parsed Version. ``original`` holds ``version`` exactly as given,
        not the normalized form.

    Raises:
        InvalidFormatError: If there are no major.minor.patch elements.
        InvalidSemVerError: If the string is not valid semver.
    """
    normalized = normalize(version, logger=logger)
    if not has_major_minor_patch(normalized):
        raise InvalidFormatError(f"No Major.Minor.Patch elements found: {version!r}")
    return parse_semver(normalized, original=version)


def parse_version_lenient(version: str, *, logger: Logger | None = None) -> Version:
    """Parse a version, allowing the minor and patch elements to be omitted.

    Used for the currently deployed version and for scanning tag lists,
    where "1.2" should read as 1.2.0 rather than be rejected. Pipeline
    versions are normalized first, as in :func:`parse_version`.

    Raises:
        InvalidSemVerError: If the string is not a (possibly partial) version.
    """
    normalized = normalize(version, logger=logger)
    return parse_semver(normalized, original=version, lenient=True)


def must_parse(version: str) -> Version:
    """Parse a version that is known to be valid.

    Intended for constants and test fixtures only. A parse failure here is a
    programming error and is raised as a plain ValueError chained from the
    underlying VersionError.
    """
    try:
        return parse_version(version)
    except VersionError as err:
        raise ValueError(f"must_parse({version!r}): {err}") from err


def split_image_reference(name: str) -> tuple[str, str]:
    """Split ``repository:tag`` into its two halves.

    The repository is everything before the first ":"; the tag runs up to the
    next ":" if there is one. A registry port therefore ends up in the tag
    ("localhost:5000/app:1.0.0" -> ("localhost", "5000/app")), which then
    fails to parse.

    Raises:
        VersionTagMissingError: If the reference has no ":".
    """
    parts = name.split(":")
    if len(parts) < 2:
        raise VersionTagMissingError(f"version tag is missing: {name!r}")
    return parts[0], parts[1]


def image_name_and_version(
    name: str, *, logger: Logger | None = None
) -> tuple[str, Version]:
    """Split an image reference and parse its tag.

    Raises:
        VersionTagMissingError: If the reference has no tag.
        InvalidFormatError, InvalidSemVerError: If the tag does not parse.
    """
    repository, tag = split_image_reference(name)
    return repository, parse_version(tag, logger=logger)


def version_from_image_reference(name: str, *, logger: Logger | None = None) -> Version:
    """Return just the parsed tag of an image reference."""
    return image_name_and_version(name, logger=logger)[1]
