from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_KOTLIN_VERSION = "1.3.30"
DEFAULT_TASKS = ("assemble",)


@dataclass
class RelocationConfig:
    original_dir: Path
    relocated_dir: Path
    kotlin_version: str = DEFAULT_KOTLIN_VERSION
    gradle_installation: Path | None = None
    scan_url: str | None = None
    plugin_mirror_url: str | None = None
    mirror_init_script: Path | None = None
    tasks: list[str] = field(default_factory=lambda: list(DEFAULT_TASKS))


class ConfigError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class UnsupportedConfigFormatError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)
