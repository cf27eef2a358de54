"""
tagpolicy - automatic upgrade decisions from version tags

Given the version an artifact is currently deployed at and either a
candidate version or the list of published tags, tagpolicy decides whether
an automatic upgrade should happen.

tagpolicy provides:
  - One Version model for standard semver and pipeline ("20.1-9638") tags
  - Semver precedence ordering, including pre-release identifiers
  - Update policies: none, all, major, minor, patch
  - Newest/lowest tag selection that tolerates malformed tags
  - YAML watch files with layered defaults
  - A small CLI for scripting and debugging decisions

Quick Start
-----------
    $ tagpolicy decide minor 1.2.3 1.5.0
    $ tagpolicy newest 1.2.3 1.2.4 1.3.0 nightly
    $ tagpolicy check watch.yaml

Package Structure
-----------------
cli : module
    Command-line interface with argparse.
core : module
    Watch file and per-image orchestration.
config : package
    YAML watch file loading and merging.
versioning : package
    Version parsing, normalization and ordering.
policy : package
    Semver update policies.
tags : module
    Newest/lowest tag selection.

Public API
----------
    from tagpolicy.versioning import parse_version, Version
    from tagpolicy.policy import SemverPolicy, SemverPolicyType
    from tagpolicy.tags import find_newest, find_lowest
    from tagpolicy.core import evaluate_image, evaluate_watch_file
"""

__version__ = "0.1.0"
__license__ = "Apache-2.0"
__description__ = "Automatic upgrade decisions from version tags"

from tagpolicy.core import evaluate_image, evaluate_watch_file
from tagpolicy.policy import SemverPolicy, SemverPolicyType
from tagpolicy.tags import find_lowest, find_newest
from tagpolicy.versioning import Version, parse_version

__all__ = [
    "__version__",
    "__license__",
    "__description__",
    "Version",
    "parse_version",
    "SemverPolicy",
    "SemverPolicyType",
    "find_newest",
    "find_lowest",
    "evaluate_image",
    "evaluate_watch_file",
]
