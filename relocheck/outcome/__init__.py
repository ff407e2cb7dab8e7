from .parse import parse_task_lines
from .types import BuildResult, OutcomeParseError, TaskOutcome, TaskResult

__all__ = [
    "parse_task_lines",
    "BuildResult",
    "OutcomeParseError",
    "TaskOutcome",
    "TaskResult",
]
