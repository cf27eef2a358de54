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

"""Exception hierarchy for tagpolicy.

This module defines a custom exception hierarchy that allows library users
to distinguish between different types of errors:

- ConfigError: Watch file errors (YAML parse, missing fields, unknown policy)
- VersionError: Version/tag errors (missing tag, bad shape, invalid semver)

All exceptions inherit from TagPolicyError, allowing users to catch all
tagpolicy errors with a single except clause if needed.

Example:
    Catching specific error types:
        ```python
        from tagpolicy.exceptions import InvalidFormatError, VersionError
        from tagpolicy.versioning import parse_version

        try:
            version = parse_version("42")
        except InvalidFormatError as e:
            print(f"Not major.minor.patch: {e}")
        except VersionError as e:
            print(f"Version error: {e}")
        ```

    Catching all tagpolicy errors:
        ```python
        from tagpolicy.exceptions import TagPolicyError

        try:
            decisions = evaluate_watch_file(Path("watch.yaml"))
        except TagPolicyError as e:
            print(f"tagpolicy error: {e}")
        ```
"""

from __future__ import annotations

from typing import Literal

__all__ = [
    "TagPolicyError",
    "ConfigError",
    "VersionError",
    "VersionTagMissingError",
    "InvalidFormatError",
    "InvalidSemVerError",
    "VersionParseError",
]


class TagPolicyError(Exception):
    """Base exception for all tagpolicy errors.

    All tagpolicy-specific exceptions inherit from this class, allowing users
    to catch all tagpolicy errors with a single except clause if needed.
    """

    pass


class ConfigError(TagPolicyError):
    """Raised for configuration-related errors.

    This exception is raised when there are problems with:

    - YAML parsing (syntax errors, invalid structure)
    - Missing watch files
    - Missing or invalid image entries
    - Unknown policy names
    """

    pass


class VersionError(TagPolicyError, ValueError):
    """Base class for version and tag errors.

    Also a ValueError, so callers that only care about "bad input" can
    catch the builtin.
    """

    pass


class VersionTagMissingError(VersionError):
    """Raised when an image reference has no ``:tag`` component."""

    def __init__(self, message: str = "version tag is missing") -> None:
        super().__init__(message)


class InvalidFormatError(VersionError):
    """Raised when a version does not have major.minor.patch elements.

    The check happens after pipeline versions have been rewritten, so
    "20.1-9638" passes while "42" and "1.2" do not.
    """

    def __init__(self, message: str = "No Major.Minor.Patch elements found") -> None:
        super().__init__(message)


class InvalidSemVerError(VersionError):
    """Raised when a version has the right shape but is not valid semver."""

    def __init__(self, message: str = "invalid semantic version") -> None:
        super().__init__(message)


class VersionParseError(VersionError):
    """Raised by policies when one side of a comparison fails to parse.

    Attributes:
        side: Which version failed, "current" or "new".

    Example:
        Telling the sides apart:
            ```python
            try:
                policy.should_update("1.0.0", "1.0.x")
            except VersionParseError as e:
                print(e.side)  # "new"
                print(e.__cause__)  # the underlying InvalidSemVerError
            ```
    """

    def __init__(self, side: Literal["current", "new"], cause: Exception) -> None:
        super().__init__(f"failed to parse {side} version: {cause}")
        self.side = side
