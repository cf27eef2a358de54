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

"""Command-line interface for tagpolicy.

Commands:

    decide: Decide whether CURRENT may be upgraded to NEW under a policy
    newest: Find the newest tag above CURRENT in a list of tags
    lowest: Find the lowest stable tag in a list of tags
    parse: Show how a version or image reference is parsed
    check: Evaluate every image in a watch file

Example:
    Decide a single upgrade:
        ```bash
        $ tagpolicy decide minor 1.2.3 1.5.0
        ```

    Pick the newest tag:
        ```bash
        $ tagpolicy newest 1.2.3 1.2.4 1.3.0 nightly
        ```

    Evaluate a watch file with debug output:
        ```bash
        $ tagpolicy check watch.yaml --debug
        ```

Exit Codes:

- 0: Success (for ``decide``: the update is allowed)
- 1: Error (invalid version, configuration problem)
- 3: ``decide`` only: the update is not allowed

Note:
    Verbose mode shows full tracebacks on errors for debugging.
    Debug mode implies verbose mode and shows per-tag details.

"""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
import sys
import traceback

from tagpolicy.core import evaluate_watch_file
from tagpolicy.exceptions import ConfigError, TagPolicyError, VersionError
from tagpolicy.logging import get_logger, set_global_logger
from tagpolicy.policy import SemverPolicy, parse_policy_type
from tagpolicy.tags import find_lowest, find_newest
from tagpolicy.versioning import detect_grammar, image_name_and_version, parse_version

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NO_UPDATE = 3


def _configure_logger(args: argparse.Namespace) -> None:
    set_global_logger(get_logger(verbose=args.verbose, debug=args.debug))


def _report_error(err: Exception, args: argparse.Namespace) -> int:
    print(f"Error: {err}")
    if args.verbose or args.debug:
        traceback.print_exc()
    return EXIT_ERROR


def cmd_decide(args: argparse.Namespace) -> int:
    """Handler for 'tagpolicy decide' command.

    Returns:
        0 if the update is allowed, 3 if it is not, 1 on invalid input.
    """
    _configure_logger(args)

    try:
        policy = SemverPolicy(parse_policy_type(args.policy))
        allowed = policy.should_update(args.current, args.new)
    except (ConfigError, VersionError) as err:
        return _report_error(err, args)

    verdict = "update" if allowed else "no update"
    print(f"{args.current} -> {args.new} ({policy.name}): {verdict}")
    return EXIT_OK if allowed else EXIT_NO_UPDATE


def cmd_newest(args: argparse.Namespace) -> int:
    """Handler for 'tagpolicy newest' command.

    Prints the newest tag, or nothing when no tag is newer than CURRENT.
    """
    _configure_logger(args)

    try:
        newest, found = find_newest(args.current, args.tags, args.match_pre_release)
    except VersionError as err:
        return _report_error(err, args)

    if found:
        print(newest)
    return EXIT_OK


def cmd_lowest(args: argparse.Namespace) -> int:
    """Handler for 'tagpolicy lowest' command."""
    _configure_logger(args)

    lowest = find_lowest(args.tags)
    if lowest:
        print(lowest)
    return EXIT_OK


def cmd_parse(args: argparse.Namespace) -> int:
    """Handler for 'tagpolicy parse' command.

    Prints every field of the parsed version, plus the repository when
    ``--image`` is given.
    """
    _configure_logger(args)

    try:
        if args.image:
            repository, parsed = image_name_and_version(args.value)
            tag = parsed.original
        else:
            repository, parsed = None, parse_version(args.value)
            tag = args.value
    except VersionError as err:
        return _report_error(err, args)

    if repository is not None:
        print(f"Repository:   {repository}")
    print(f"Original:     {parsed.original}")
    print(f"Grammar:      {detect_grammar(tag).value}")
    print(f"Major:        {parsed.major}")
    print(f"Minor:        {parsed.minor}")
    print(f"Patch:        {parsed.patch}")
    print(f"Pre-release:  {parsed.pre_release}")
    print(f"Metadata:     {parsed.metadata}")
    print(f"Canonical:    {parsed}")
    return EXIT_OK


def cmd_check(args: argparse.Namespace) -> int:
    """Handler for 'tagpolicy check' command.

    Evaluates every image of a watch file and prints a results table.
    """
    _configure_logger(args)

    watch_path = Path(args.watch_file).resolve()
    print(f"Checking watch file: {watch_path}")
    print()

    try:
        decisions = evaluate_watch_file(
            watch_path, verbose=args.verbose, debug=args.debug
        )
    except TagPolicyError as err:
        return _report_error(err, args)

    print()
    print("=" * 70)
    print("UPDATE DECISIONS")
    print("=" * 70)
    for d in decisions:
        status = "UPDATE" if d.should_update else "keep"
        print(f"[{status:^6}] {d.image}")
        print(f"         policy: {d.policy}, candidate: {d.candidate or '-'}")
    print("=" * 70)

    pending = sum(1 for d in decisions if d.should_update)
    print(f"{pending} of {len(decisions)} image(s) can be updated")
    return EXIT_OK


def _add_output_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show decisions and high-level status updates",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )


def _package_version() -> str:
    try:
        return version("tagpolicy")
    except PackageNotFoundError:
        return "unknown"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands registered."""
    parser = argparse.ArgumentParser(
        prog="tagpolicy",
        description="tagpolicy - decide automatic upgrades from version tags",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"tagpolicy {_package_version()}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'decide' command
    parser_decide = subparsers.add_parser(
        "decide",
        help="Decide whether CURRENT may be upgraded to NEW",
        description="Apply a semver policy (none, all, major, minor, patch) to two versions.",
    )
    parser_decide.add_argument("policy", help="Policy mode")
    parser_decide.add_argument("current", help="Currently deployed version (or 'latest')")
    parser_decide.add_argument("new", help="Candidate version")
    _add_output_flags(parser_decide)
    parser_decide.set_defaults(func=cmd_decide)

    # 'newest' command
    parser_newest = subparsers.add_parser(
        "newest",
        help="Find the newest tag above CURRENT",
        description="Print the highest tag that is newer than CURRENT; unparseable tags are skipped.",
    )
    parser_newest.add_argument("current", help="Currently deployed version")
    parser_newest.add_argument("tags", nargs="*", help="Candidate tags")
    parser_newest.add_argument(
        "--match-pre-release",
        action="store_true",
        help="Only consider tags on the same pre-release channel as CURRENT",
    )
    _add_output_flags(parser_newest)
    parser_newest.set_defaults(func=cmd_newest)

    # 'lowest' command
    parser_lowest = subparsers.add_parser(
        "lowest",
        help="Find the lowest stable tag",
        description="Print the lowest stable tag in canonical form.",
    )
    parser_lowest.add_argument("tags", nargs="*", help="Tags to scan")
    _add_output_flags(parser_lowest)
    parser_lowest.set_defaults(func=cmd_lowest)

    # 'parse' command
    parser_parse = subparsers.add_parser(
        "parse",
        help="Show how a version is parsed",
        description="Parse a version (or an image reference with --image) and print its fields.",
    )
    parser_parse.add_argument("value", help="Version string or image reference")
    parser_parse.add_argument(
        "--image",
        action="store_true",
        help="Treat VALUE as an image reference (repository:tag)",
    )
    _add_output_flags(parser_parse)
    parser_parse.set_defaults(func=cmd_parse)

    # 'check' command
    parser_check = subparsers.add_parser(
        "check",
        help="Evaluate every image in a watch file",
        description="Load a watch file, resolve candidates and apply each image's policy.",
    )
    parser_check.add_argument("watch_file", help="Path to the watch file YAML")
    _add_output_flags(parser_check)
    parser_check.set_defaults(func=cmd_check)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the tagpolicy CLI.

    This function is registered as the 'tagpolicy' console script in
    pyproject.toml.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
