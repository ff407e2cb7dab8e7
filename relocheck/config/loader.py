import json
import os
import tomllib
from pathlib import Path
from typing import Any, Mapping

import yaml

from .types import (
    DEFAULT_KOTLIN_VERSION,
    ConfigError,
    RelocationConfig,
    UnsupportedConfigFormatError,
)

# Property names understood by `-D key=value`, mapped to config fields.
PROPERTIES: dict[str, str] = {
    "org.gradle.kotlin.test.gradle-installation": "gradle_installation",
    "org.gradle.kotlin.test.kotlin-version": "kotlin_version",
    "org.gradle.kotlin.test.scan-url": "scan_url",
    "org.gradle.internal.plugins.portal.url.override": "plugin_mirror_url",
    "org.gradle.smoketests.mirror.init.script": "mirror_init_script",
    "original.dir": "original_dir",
    "relocated.dir": "relocated_dir",
}

ENV_VARS: dict[str, str] = {
    "RELOCHECK_GRADLE_INSTALLATION": "gradle_installation",
    "RELOCHECK_KOTLIN_VERSION": "kotlin_version",
    "RELOCHECK_SCAN_URL": "scan_url",
    "RELOCHECK_PLUGIN_MIRROR_URL": "plugin_mirror_url",
    "RELOCHECK_MIRROR_INIT_SCRIPT": "mirror_init_script",
    "RELOCHECK_ORIGINAL_DIR": "original_dir",
    "RELOCHECK_RELOCATED_DIR": "relocated_dir",
}

_STRING_FIELDS = {"kotlin_version", "scan_url", "plugin_mirror_url"}
_DIR_FIELDS = {"original_dir", "relocated_dir", "gradle_installation"}
_FILE_FIELDS = {"mirror_init_script"}
_KEYS = _STRING_FIELDS | _DIR_FIELDS | _FILE_FIELDS | {"tasks"}


def load_config(
    path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    properties: Mapping[str, str] | None = None,
) -> RelocationConfig:
    return _build_config(merge_sources(path, environ=environ, properties=properties))


def load_script_settings(
    path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    properties: Mapping[str, str] | None = None,
) -> tuple[str, str | None]:
    """Kotlin version and scan URL for the init script; checkouts are not needed."""
    raw = merge_sources(path, environ=environ, properties=properties)
    _check_keys(raw)

    kotlin_version = DEFAULT_KOTLIN_VERSION
    if "kotlin_version" in raw:
        kotlin_version = _string_value("kotlin_version", raw["kotlin_version"])

    scan_url = None
    if "scan_url" in raw:
        scan_url = _string_value("scan_url", raw["scan_url"])

    return kotlin_version, scan_url


def merge_sources(
    path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    properties: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    raw: dict[str, Any] = {}

    if path is not None:
        raw.update(read_mapping(path))

    if environ is None:
        environ = os.environ

    for var, key in ENV_VARS.items():
        value = environ.get(var)
        # Unset and empty behave the same, like an absent system property.
        if value:
            raw[key] = value

    for prop, value in (properties or {}).items():
        if prop not in PROPERTIES:
            raise ConfigError(f"Unknown property: {prop}")
        if value:
            raw[PROPERTIES[prop]] = value

    return raw


def parse_property(text: str) -> tuple[str, str]:
    key, sep, value = text.partition("=")
    key = key.strip()

    if not sep:
        raise ConfigError(f"Property must be KEY=VALUE, got: {text}")

    if key not in PROPERTIES:
        raise ConfigError(
            f"Unknown property: {key}\n Expected one of: {', '.join(sorted(PROPERTIES))}"
        )

    return key, value.strip()


def read_mapping(path: str | Path) -> Mapping[str, Any]:
    pure_path = Path(path).expanduser().resolve()

    if not pure_path.exists():
        raise ConfigError(f"Config file not found: {pure_path}")

    if not pure_path.is_file():
        raise ConfigError(f"Config path is not a file: {pure_path}")

    fmt = _detect_format(pure_path)
    return _parse_file(pure_path, fmt)


def _detect_format(path: Path) -> str:
    fmt = path.suffix
    match fmt:
        case ".yaml" | ".yml":
            return "yaml"
        case ".toml":
            return "toml"
        case ".json":
            return "json"
        case _:
            raise UnsupportedConfigFormatError(
                f"Non supported file extension: {fmt}\n Expected format: .yml/.yaml, .toml, .json"
            )


def _parse_file(path: Path, fmt: str) -> Mapping[str, Any]:
    match fmt:
        case "yaml":
            return _parse_yaml(path)
        case "toml":
            return _parse_toml(path)
        case "json":
            return _parse_json(path)
        case _:
            raise AssertionError("Unreachable")


def _parse_yaml(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: invalid YAML") from exc

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: YAML parsed successfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def _parse_toml(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: invalid TOML") from exc

    return raw_file


def _parse_json(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path}: invalid JSON") from exc

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: JSON parsed successfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def _build_config(raw: Mapping[str, Any]) -> RelocationConfig:
    fields: dict[str, Any] = {}

    _check_keys(raw)

    for key in ("original_dir", "relocated_dir"):
        if key not in raw:
            raise ConfigError(f"Missing '{key}'")

    for key, value in raw.items():
        if key == "tasks":
            fields["tasks"] = _build_tasks(value)
            continue

        value = _string_value(key, value)

        if key in _STRING_FIELDS:
            fields[key] = value
        elif key in _DIR_FIELDS:
            fields[key] = _existing_path(key, value, want_dir=True)
        else:
            fields[key] = _existing_path(key, value, want_dir=False)

    if fields["original_dir"] == fields["relocated_dir"]:
        raise ConfigError(
            f"original_dir and relocated_dir must differ: {fields['original_dir']}"
        )

    return RelocationConfig(**fields)


def _build_tasks(value: Any) -> list[str]:
    tasks = []
    seen = set()

    if not isinstance(value, list):
        raise ConfigError("'tasks' should be a list")

    for item in value:
        if not isinstance(item, str):
            raise ConfigError(f"{item} should be a string in the task list")

        task = item.strip()

        if len(task) < 1:
            raise ConfigError("A task name is empty")

        if task in seen:
            continue

        tasks.append(task)
        seen.add(task)

    if len(tasks) < 1:
        raise ConfigError("There must be at least one task to run")

    return tasks


def _existing_path(key: str, value: str, *, want_dir: bool) -> Path:
    path = Path(value).expanduser().resolve()

    if not path.exists():
        raise ConfigError(f"'{key}' not found: {path}")

    if want_dir and not path.is_dir():
        raise ConfigError(f"'{key}' is not a directory: {path}")

    if not want_dir and not path.is_file():
        raise ConfigError(f"'{key}' is not a file: {path}")

    return path


def _check_keys(raw: Mapping[str, Any]) -> None:
    for key in raw.keys():
        if key not in _KEYS:
            raise ConfigError(f"Can't process: {key}")


def _string_value(key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' should be a string, got {type(value)}")

    value = value.strip()
    if len(value) < 1:
        raise ConfigError(f"'{key}' can't be empty")

    return value
