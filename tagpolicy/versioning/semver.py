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

"""Semantic version model and ordering for tagpolicy.

This module is format-agnostic in the same sense as the rest of the
versioning package: it does NOT fetch tags or read files. It parses the
standard grammar ``[v]MAJOR.MINOR.PATCH[-PRERELEASE][+METADATA]`` into a
:class:`Version` and orders versions by semver precedence.

Pipeline versions ("20.1-9638") are handled one layer up, in
:mod:`tagpolicy.versioning.pipeline`, by rewriting them into this grammar.
"""

from __future__ import annotations

from dataclasses import dataclass
import functools
import re

from tagpolicy.exceptions import InvalidSemVerError

_IDENT = r"[0-9A-Za-z-]+"

_SEMVER_RE = re.compile(
    r"v?(?P<major>[0-9]+)\.(?P<minor>[0-9]+)\.(?P<patch>[0-9]+)"
    rf"(?:-(?P<pre>{_IDENT}(?:\.{_IDENT})*))?"
    rf"(?:\+(?P<meta>{_IDENT}(?:\.{_IDENT})*))?"
)

# Same grammar with minor and patch optional ("1.2" reads as 1.2.0)
_LENIENT_RE = re.compile(
    r"v?(?P<major>[0-9]+)(?:\.(?P<minor>[0-9]+))?(?:\.(?P<patch>[0-9]+))?"
    rf"(?:-(?P<pre>{_IDENT}(?:\.{_IDENT})*))?"
    rf"(?:\+(?P<meta>{_IDENT}(?:\.{_IDENT})*))?"
)

PreKey = tuple[tuple[int, object], ...]


def _split_pre_tokens(pre: str) -> PreKey:
    """Split a pre-release string into comparable identifier tokens.

    Example: "rc.10" -> ((1, "rc"), (0, 10))
      (0, int) for numeric identifiers (sort before text)
      (1, str) for alphanumeric identifiers (compared as-is, ASCII order)

    Tuple comparison then gives the "shorter prefix is lower" rule for free.
    """
    out: list[tuple[int, object]] = []
    for t in pre.split("."):
        if t.isdigit():
            out.append((0, int(t)))
        else:
            out.append((1, t))
    return tuple(out)


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """A parsed, immutable version.

    Attributes:
        major: Major version number.
        minor: Minor version number.
        patch: Patch version number.
        pre_release: Pre-release string without the leading "-"; empty for
            stable releases.
        metadata: Build metadata without the leading "+". Informational only.
        original: The exact string the version was parsed from.

    Equality, hashing and ordering use (major, minor, patch, pre_release)
    only, so ``Version`` parsed from "v1.2.3" equals one parsed from
    "1.2.3+build.7".
    """

    major: int
    minor: int
    patch: int
    pre_release: str = ""
    metadata: str = ""
    original: str = ""

    @property
    def precedence_key(self) -> tuple[int, int, int, int, PreKey]:
        """Key implementing semver precedence.

        Stable releases get rank 1 so they sort after every pre-release of
        the same major.minor.patch.
        """
        if not self.pre_release:
            return (self.major, self.minor, self.patch, 1, ())
        return (
            self.major,
            self.minor,
            self.patch,
            0,
            _split_pre_tokens(self.pre_release),
        )

    @property
    def is_stable(self) -> bool:
        return not self.pre_release

    def compare(self, other: Version) -> int:
        """Return -1, 0 or 1 as self is lower, equal or greater than other."""
        a, b = self.precedence_key, other.precedence_key
        return (a > b) - (a < b)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.precedence_key == other.precedence_key

    def __lt__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.precedence_key < other.precedence_key

    def __hash__(self) -> int:
        return hash(self.precedence_key)

    def __str__(self) -> str:
        s = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre_release:
            s += f"-{self.pre_release}"
        if self.metadata:
            s += f"+{self.metadata}"
        return s


def parse_semver(
    text: str, *, original: str | None = None, lenient: bool = False
) -> Version:
    """Parse a standard semantic version string.

    Args:
        text: Version in the standard grammar, optionally prefixed with "v".
        original: String to record as ``Version.original``. Defaults to
            ``text``; callers that rewrote the input pass the untouched one.
        lenient: Accept a missing minor and/or patch, filling them with 0.

    Returns:
        The parsed Version.

    Raises:
        InvalidSemVerError: If ``text`` does not match the grammar.
    """
    m = (_LENIENT_RE if lenient else _SEMVER_RE).fullmatch(text)
    if not m:
        raise InvalidSemVerError(f"invalid semantic version: {text!r}")
    return Version(
        major=int(m.group("major")),
        minor=int(m.group("minor") or 0),
        patch=int(m.group("patch") or 0),
        pre_release=m.group("pre") or "",
        metadata=m.group("meta") or "",
        original=text if original is None else original,
    )
