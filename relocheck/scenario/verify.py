from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping

from relocheck.outcome import BuildResult, TaskOutcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Mismatch:
    path: str
    expected: TaskOutcome
    actual: TaskOutcome

    def __str__(self) -> str:
        return f"Task '{self.path}' was {self.actual.value} but should have been {self.expected.value}"


@dataclass(frozen=True)
class VerificationReport:
    total_expected: int
    expected_from_cache: int
    missing: list[str] = field(default_factory=list)
    surplus: list[str] = field(default_factory=list)
    mismatches: list[Mismatch] = field(default_factory=list)

    @property
    def tasks_match(self) -> bool:
        return not self.missing and not self.surplus

    @property
    def ok(self) -> bool:
        return self.tasks_match and not self.mismatches

    def lines(self) -> list[str]:
        out = [
            f"> Expecting {self.expected_from_cache} tasks out of {self.total_expected} to be cached"
        ]
        if not self.tasks_match:
            out.append(f"> Tasks missing:    {', '.join(self.missing) or '-'}")
            out.append(f"> Tasks in surplus: {', '.join(self.surplus) or '-'}")
        for mismatch in self.mismatches:
            out.append(f"> {mismatch}")
        out.append("> PASSED" if self.ok else "> FAILED")
        return out


class ExpectedResults:
    """Expected outcome per task path for one relocated build.

    The build must report exactly the tasks in the table, no more and no
    fewer, and every task must have its expected outcome. An empty table
    therefore expects a build that ran no tasks at all.
    """

    def __init__(self, outcomes: Mapping[str, TaskOutcome]):
        self.outcomes = dict(outcomes)

    def __len__(self) -> int:
        return len(self.outcomes)

    def check(self, result: BuildResult) -> VerificationReport:
        reported = {task.path: task.outcome for task in result.tasks}

        matching = {
            path: expected for path, expected in self.outcomes.items() if path in reported
        }
        has_matching_tasks = len(matching) == len(self.outcomes) and len(matching) == len(
            reported
        )

        missing: list[str] = []
        surplus: list[str] = []
        if not has_matching_tasks:
            missing = [path for path in self.outcomes if path not in matching]
            surplus = [path for path in reported if path not in matching]

        # Keep going after the first mismatch so one run reports all of them.
        mismatches = [
            Mismatch(path, expected, reported[path])
            for path, expected in matching.items()
            if reported[path] != expected
        ]

        return VerificationReport(
            total_expected=len(self.outcomes),
            expected_from_cache=sum(
                1 for outcome in self.outcomes.values() if outcome is TaskOutcome.FROM_CACHE
            ),
            missing=missing,
            surplus=surplus,
            mismatches=mismatches,
        )

    def verify(self, result: BuildResult) -> bool:
        report = self.check(result)
        log_report(report)
        return report.ok


def log_report(report: VerificationReport) -> None:
    logger.info(
        "> Expecting %d tasks out of %d to be cached",
        report.expected_from_cache,
        report.total_expected,
    )
    if not report.tasks_match:
        logger.warning("> Tasks missing:    %s", report.missing)
        logger.warning("> Tasks in surplus: %s", report.surplus)
    for mismatch in report.mismatches:
        logger.warning("> %s", mismatch)
