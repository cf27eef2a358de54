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

"""Pipeline ("sumo") version grammar.

Some release pipelines tag builds as ``MAJOR.MINOR-[TIMESTAMP-]BUILD[-HASH]``:

    20.1-9638                           (old style)
    21.0-1571107855-1410-599b8254c7bb   (timestamp, build, commit hash)

These are folded into the standard grammar by replacing the first "-" with
".", which makes the timestamp (or the build number when there is no
timestamp) the patch component and leaves the rest as the pre-release:

    20.1-9638                           -> 20.1.9638
    21.0-1571107855-1410-599b8254c7bb   -> 21.0.1571107855-1410-599b8254c7bb

After the rewrite the pre-release slot carries build/hash data rather than a
release channel, which is why policies do not channel-gate pipeline
candidates.
"""

from __future__ import annotations

import enum
import re

from tagpolicy.logging import Logger, resolve_logger

_PIPELINE_RE = re.compile(
    r"(?P<major>[0-9]+)\.(?P<minor>[0-9]+)"
    r"(?:-(?P<timestamp>[0-9]{10}))?"
    r"-(?P<build>[0-9]+)"
    r"(?:-(?P<hash>[0-9A-Za-z]+))?"
)


class VersionGrammar(enum.Enum):
    """Which grammar a raw version string is written in."""

    STANDARD = "standard"
    PIPELINE = "pipeline"


def is_pipeline_version(version: str) -> bool:
    """Return True if the whole string is a pipeline version."""
    return _PIPELINE_RE.fullmatch(version) is not None


def detect_grammar(version: str) -> VersionGrammar:
    """Classify a raw version string.

    Anything that is not a pipeline version is treated as standard; whether
    it is actually valid is decided by the parser.
    """
    if is_pipeline_version(version):
        return VersionGrammar.PIPELINE
    return VersionGrammar.STANDARD


def normalize(version: str, *, logger: Logger | None = None) -> str:
    """Rewrite a pipeline version into the standard grammar.

    Only the first "-" is replaced. Strings that are not pipeline versions
    are returned unchanged.

    Args:
        version: Raw version string.
        logger: Optional logger; defaults to the global logger.

    Returns:
        The string to hand to the standard parser.
    """
    if detect_grammar(version) is not VersionGrammar.PIPELINE:
        return version
    log = resolve_logger(logger)
    rewritten = version.replace("-", ".", 1)
    log.debug("VERSION", f"Pipeline version {version!r} rewritten to {rewritten!r}")
    return rewritten
