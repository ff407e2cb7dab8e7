from pathlib import Path
from typing import Any, Mapping

from relocheck.outcome import OutcomeParseError, TaskOutcome

from .loader import read_mapping
from .types import ConfigError

TABLES_DIR = Path(__file__).parent / "tables"


def load_expectations(path: str | Path) -> dict[str, TaskOutcome]:
    raw_file = read_mapping(path)
    return _build_expectations(raw_file, source=str(path))


def builtin_expectations(name: str) -> dict[str, TaskOutcome]:
    path = TABLES_DIR / f"{name}.yml"
    if not path.is_file():
        available = ", ".join(builtin_names()) or "none"
        raise ConfigError(f"Unknown built-in expectation table: {name} (available: {available})")
    return load_expectations(path)


def builtin_names() -> list[str]:
    return sorted(p.stem for p in TABLES_DIR.glob("*.yml"))


def _build_expectations(raw: Mapping[str, Any], *, source: str) -> dict[str, TaskOutcome]:
    outcomes: dict[str, TaskOutcome] = {}

    if "tasks" not in raw:
        raise ConfigError(f"{source}: missing 'tasks' field")

    if not isinstance(raw["tasks"], Mapping):
        raise ConfigError(f"{source}: 'tasks' must be a mapping, got {type(raw['tasks'])}")

    if len(raw["tasks"]) < 1:
        raise ConfigError(f"{source}: there must be at least one task in the table")

    for path, value in raw["tasks"].items():
        if not isinstance(path, str):
            raise ConfigError(f"{source}: task path must be a string, got {type(path)}")

        path_norm = path.strip()

        if not path_norm.startswith(":"):
            raise ConfigError(f"{source}: task path must start with ':', got {path!r}")

        if path_norm in outcomes:
            raise ConfigError(f"{source}: duplicate task path after normalization: {path_norm}")

        if not isinstance(value, str) or len(value.strip()) < 1:
            raise ConfigError(f"{source}: {path_norm}: outcome should be a non-empty string")

        try:
            outcomes[path_norm] = TaskOutcome.parse(value)
        except OutcomeParseError as exc:
            raise ConfigError(f"{source}: {path_norm}: {exc}") from exc

    return outcomes
