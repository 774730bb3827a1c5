"""Driver configuration loading.

Configuration files may be JSON (``.json``) or YAML (``.yaml`` / ``.yml``)
mappings.  Every key is optional; omitted keys keep the defaults of
:class:`DriverConfig`.  Values supplied on the command line are layered on
top with :meth:`DriverConfig.with_overrides`.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
import json
import logging
from pathlib import Path
from typing import Any, Mapping

import yaml

logger = logging.getLogger(__name__)

__all__ = ["ConfigError", "DriverConfig", "load_config"]

OUTPUT_FORMATS = ("text", "json")
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ConfigError(ValueError):
    """Raised when a configuration file or value is invalid."""


@dataclass(frozen=True)
class DriverConfig:
    """Settings controlling how a command stream is executed and rendered."""

    precision: int = 3
    strict: bool = True
    output_format: str = "text"
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if isinstance(self.precision, bool) or not isinstance(self.precision, int):
            raise ConfigError("precision must be an integer")
        if self.precision < 0:
            raise ConfigError("precision must be non-negative")
        if not isinstance(self.strict, bool):
            raise ConfigError("strict must be a boolean")
        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigError(
                f"output_format must be one of {', '.join(OUTPUT_FORMATS)}"
            )
        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        object.__setattr__(self, "log_level", self.log_level.upper())

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DriverConfig":
        known = {item.name for item in fields(cls)}
        unknown = sorted(str(key) for key in data if key not in known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**dict(data))

    def with_overrides(self, **overrides: Any) -> "DriverConfig":
        """Return a copy with every non-``None`` override applied."""

        applied = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **applied)


def load_config(path: str | Path | None) -> DriverConfig:
    """Load a :class:`DriverConfig` from *path*; ``None`` yields defaults."""

    if path is None:
        return DriverConfig()

    config_path = Path(path).expanduser()
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    text = config_path.read_text(encoding="utf-8")
    suffix = config_path.suffix.lower()
    try:
        if suffix == ".json":
            data = json.loads(text)
        elif suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(text)
        else:
            raise ConfigError(f"Unsupported configuration format: {config_path.suffix}")
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Invalid configuration in {config_path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ConfigError("Configuration root must be a mapping")

    config = DriverConfig.from_mapping(data)
    logger.debug("Loaded configuration from %s: %s", config_path, config)
    return config
