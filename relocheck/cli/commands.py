from __future__ import annotations

import argparse
import logging
import sys
import tempfile
from pathlib import Path

from relocheck.config import (
    ConfigError,
    builtin_expectations,
    load_config,
    load_expectations,
    load_script_settings,
    parse_property,
)
from relocheck.outcome import TaskOutcome
from relocheck.runner import BuildError, render_init_script
from relocheck.scenario import ExpectedResults, RelocationScenario, VerificationReport

from .args import build_parser


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.INFO,
            format="%(message)s",
        )

        match args.command:
            case "verify":
                return cmd_verify(args)
            case "init-script":
                return cmd_init_script(args)
            case "expectations":
                return cmd_expectations(args)
            case _:
                return 2

    except (ConfigError, BuildError) as exc:
        print(str(exc), file=sys.stderr)
        return 2

    except KeyboardInterrupt:
        return 130


def cmd_verify(args: argparse.Namespace) -> int:
    config = load_config(args.config, properties=_properties(args))
    expected = ExpectedResults(_table(args))

    if args.work_dir is not None:
        Path(args.work_dir).mkdir(parents=True, exist_ok=True)
        report = _run_scenario(config, expected, args.work_dir, args)
    else:
        with tempfile.TemporaryDirectory(prefix="relocheck-") as work_dir:
            report = _run_scenario(config, expected, work_dir, args)

    _print_report(report)
    return 0 if report.ok else 1


def cmd_init_script(args: argparse.Namespace) -> int:
    kotlin_version, scan_url = load_script_settings(args.config, properties=_properties(args))
    print(
        render_init_script(
            args.cache_dir,
            args.kotlin_version or kotlin_version,
            args.scan_url or scan_url,
        ),
        end="",
    )
    return 0


def cmd_expectations(args: argparse.Namespace) -> int:
    table = _table(args)
    for path in sorted(table):
        print(f"{path} {table[path].value}")
    counts = {outcome: 0 for outcome in TaskOutcome}
    for outcome in table.values():
        counts[outcome] += 1
    summary = ", ".join(f"{o.value}={n}" for o, n in counts.items() if n)
    print(f"{len(table)} tasks ({summary})", file=sys.stderr)
    return 0


def _run_scenario(config, expected, work_dir, args) -> VerificationReport:
    scenario = RelocationScenario(
        config, expected, work_dir, forward_output=not args.quiet_build
    )
    return scenario.run()


def _properties(args: argparse.Namespace) -> dict[str, str]:
    properties = {}
    for item in args.properties:
        key, value = parse_property(item)
        properties[key] = value
    return properties


def _table(args: argparse.Namespace) -> dict[str, TaskOutcome]:
    if args.expectations:
        return load_expectations(args.expectations)
    return builtin_expectations(args.builtin)


def _print_report(report: VerificationReport) -> None:
    for line in report.lines():
        print(line)
