"""
config.py

Optional TOML settings for the command line tool.

    [nsa2dna]
    echo = true            # print the DNA to stdout
    write_output = true    # write the DNA to the output path
    table = false          # print a summary table after the DNA
    log_level = "WARNING"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

import toml

SECTION = "nsa2dna"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    echo: bool = True
    write_output: bool = True
    table: bool = False
    log_level: str = "WARNING"

    @property
    def level(self) -> int:
        return logging.getLevelName(self.log_level.upper())

    def with_overrides(self, **overrides: Any) -> Settings:
        # None means "not given on the command line".
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def settings_from_mapping(section: Dict[str, Any]) -> Settings:
    values: Dict[str, Any] = {}
    for f in fields(Settings):
        if f.name not in section:
            continue
        value = section[f.name]
        expected = bool if f.type in ("bool", bool) else str
        if not isinstance(value, expected):
            raise ConfigError(f"[{SECTION}] {f.name} must be a {expected.__name__}, got {value!r}")
        values[f.name] = value

    settings = Settings(**values)
    if not isinstance(settings.level, int):
        raise ConfigError(f"[{SECTION}] log_level {settings.log_level!r} is not a logging level")
    return settings


def load_settings(path: Optional[str] = None) -> Settings:
    if path is None:
        return Settings()
    try:
        cfg = toml.load(path)
    except (OSError, toml.TomlDecodeError) as ex:
        raise ConfigError(f"Cannot read settings from {path}: {ex}") from ex
    return settings_from_mapping(cfg.get(SECTION, {}))
