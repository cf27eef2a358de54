"""
Version parsing and ordering for tagpolicy.

This package turns heterogeneous tag strings into comparable Version values.
Two grammars are supported and share one comparator:

1. **Standard semantic versions**:
   - ``[v]MAJOR.MINOR.PATCH[-PRERELEASE][+METADATA]``
   - Ordered by semver precedence: 1.0.0-alpha < 1.0.0-alpha.1 < 1.0.0
   - Build metadata is ignored for ordering and equality

2. **Pipeline versions**:
   - ``MAJOR.MINOR-[TIMESTAMP-]BUILD[-HASH]`` (e.g., "21.0-1571107855-1410-599b8254c7bb")
   - Rewritten into the standard grammar by turning the first "-" into "."

Modules
-------
semver : module
    Version dataclass, precedence ordering and standard-grammar parser.
pipeline : module
    Pipeline grammar detection and normalization.
parser : module
    Public parsing API, including image reference handling.

Public API
----------
Version : dataclass
    Immutable parsed version.
VersionGrammar : enum
    STANDARD or PIPELINE.
parse_version : function
    Parse a raw tag in either grammar.
must_parse : function
    Parse a trusted constant, raising ValueError on failure.
normalize : function
    Apply the pipeline rewrite.
is_pipeline_version : function
    Detect the pipeline grammar.
image_name_and_version : function
    Split ``repo:tag`` and parse the tag.

Examples
--------
    >>> from tagpolicy.versioning import parse_version
    >>> v = parse_version("21.0-1571107855-1410-599b8254c7bb")
    >>> (v.major, v.minor, v.patch, v.pre_release)
    (21, 0, 1571107855, '1410-599b8254c7bb')
    >>> parse_version("1.0.0") > parse_version("1.0.0-rc.1")
    True
"""

from .parser import (
    LATEST,
    has_major_minor_patch,
    image_name_and_version,
    must_parse,
    parse_version,
    parse_version_lenient,
    split_image_reference,
    version_from_image_reference,
)
from .pipeline import VersionGrammar, detect_grammar, is_pipeline_version, normalize
from .semver import Version, parse_semver

__all__ = [
    "LATEST",
    "Version",
    "VersionGrammar",
    "detect_grammar",
    "has_major_minor_patch",
    "image_name_and_version",
    "is_pipeline_version",
    "must_parse",
    "normalize",
    "parse_semver",
    "parse_version",
    "parse_version_lenient",
    "split_image_reference",
    "version_from_image_reference",
]
