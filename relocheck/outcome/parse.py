import re

from .types import TaskOutcome, TaskResult

# `> Task :project:name` optionally followed by a label such as FROM-CACHE.
_TASK_LINE = re.compile(r"^> Task (?P<path>:\S*)(?: (?P<label>[A-Z][A-Z-]*))?\s*$")


def parse_task_lines(output: str) -> tuple[TaskResult, ...]:
    """Collect task outcomes from Gradle `--console=plain` output.

    A task reported more than once keeps its position but takes the last
    outcome.
    """
    outcomes: dict[str, TaskOutcome] = {}

    for line in output.splitlines():
        match = _TASK_LINE.match(line)
        if match is None:
            continue
        outcomes[match["path"]] = TaskOutcome.parse(match["label"] or "")

    return tuple(TaskResult(path, outcome) for path, outcome in outcomes.items())
