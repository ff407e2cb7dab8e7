from .expectations import builtin_expectations, builtin_names, load_expectations
from .loader import PROPERTIES, load_config, load_script_settings, parse_property
from .types import ConfigError, RelocationConfig, UnsupportedConfigFormatError

__all__ = [
    "load_config",
    "load_script_settings",
    "load_expectations",
    "builtin_expectations",
    "builtin_names",
    "parse_property",
    "PROPERTIES",
    "RelocationConfig",
    "ConfigError",
    "UnsupportedConfigFormatError",
]
