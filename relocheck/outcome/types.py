from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OutcomeParseError(ValueError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class TaskOutcome(str, Enum):
    """How a task was resolved in one build.

    SUCCESS: executed.
    FROM_CACHE: outputs loaded from the build cache.
    UP_TO_DATE: outputs unchanged since the last run.
    SKIPPED: not executed, e.g. disabled by `onlyIf`.
    NO_SOURCE: nothing to do, no inputs.
    FAILED: executed and failed.
    """

    SUCCESS = "SUCCESS"
    FROM_CACHE = "FROM_CACHE"
    UP_TO_DATE = "UP_TO_DATE"
    SKIPPED = "SKIPPED"
    NO_SOURCE = "NO_SOURCE"
    FAILED = "FAILED"

    @property
    def label(self) -> str:
        """Label printed by Gradle's plain console, empty for SUCCESS."""
        if self is TaskOutcome.SUCCESS:
            return ""
        return self.value.replace("_", "-")

    @classmethod
    def parse(cls, text: str) -> TaskOutcome:
        name = text.strip().upper().replace("-", "_")
        if not name:
            return cls.SUCCESS
        try:
            return cls(name)
        except ValueError:
            raise OutcomeParseError(f"Unknown task outcome: {text!r}") from None


@dataclass(frozen=True)
class TaskResult:
    path: str
    outcome: TaskOutcome


@dataclass(frozen=True)
class BuildResult:
    args: tuple[str, ...]
    returncode: int
    output: str
    tasks: tuple[TaskResult, ...]
    duration_s: float = 0.0

    @property
    def success(self) -> bool:
        return self.returncode == 0

    def task(self, path: str) -> TaskResult | None:
        found = None
        for task in self.tasks:
            if task.path == path:
                found = task
        return found

    def task_paths(self) -> list[str]:
        return [task.path for task in self.tasks]
