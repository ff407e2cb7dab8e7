from __future__ import annotations

import argparse


def _add_table_options(parser: argparse.ArgumentParser) -> None:
    table = parser.add_mutually_exclusive_group()
    table.add_argument(
        "--expectations",
        help="Path to an expectation table (.yml/.yaml, .toml, .json)",
    )
    table.add_argument(
        "--builtin",
        default="spek",
        help="Name of a bundled expectation table",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="relocheck")

    parser.add_argument(
        "--config",
        default=None,
        help="Path to config file",
    )
    parser.add_argument(
        "-D",
        dest="properties",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Set a property, overriding the config file and environment",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
    )

    # verify
    verify = subparsers.add_parser(
        "verify", help="Build both checkouts and compare task outcomes"
    )
    _add_table_options(verify)
    verify.add_argument(
        "--work-dir",
        default=None,
        help="Directory for the init script and build cache (default: a temporary directory)",
    )
    verify.add_argument(
        "--quiet-build",
        action="store_true",
        help="Don't forward Gradle output",
    )

    # init-script
    init_script = subparsers.add_parser("init-script", help="Print the generated init script")
    init_script.add_argument(
        "--cache-dir",
        required=True,
        help="Build cache directory",
    )
    init_script.add_argument(
        "--kotlin-version",
        default=None,
        help="Kotlin plugin version (default: from properties)",
    )
    init_script.add_argument(
        "--scan-url",
        default=None,
        help="Build scan server",
    )

    # expectations
    expectations = subparsers.add_parser("expectations", help="List an expectation table")
    _add_table_options(expectations)

    return parser
