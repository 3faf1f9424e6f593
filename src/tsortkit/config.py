from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TextIO

import yaml

from .errors import ConfigError

DEFAULT_PROGRAM = "tsort"
DEFAULT_LOG_LEVEL = "WARNING"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class TsortConfig:
    """Settings for the tsort driver, read from the ``spec`` block of a YAML file.

    Example::

        spec:
          program: tsort
          dedupeEdges: true
          logging:
            level: WARNING
    """

    raw: dict[str, Any] = field(default_factory=dict)
    config_path: Path | None = None

    @staticmethod
    def default() -> TsortConfig:
        return TsortConfig(raw={"spec": {}})

    @staticmethod
    def from_yaml(config_path: Path) -> TsortConfig:
        try:
            raw = yaml.safe_load(Path(config_path).read_text(encoding="utf-8"))
        except UnicodeDecodeError as e:
            raise ConfigError(f"{config_path}: not valid UTF-8: {e.reason}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"{config_path}: invalid YAML: {e}") from e
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ConfigError(f"{config_path}: top-level document must be a mapping")
        raw.setdefault("spec", {})
        cfg = TsortConfig(raw=raw, config_path=Path(config_path))
        cfg.validate()
        return cfg

    @property
    def spec(self) -> dict[str, Any]:
        spec = self.raw.get("spec") or {}
        if not isinstance(spec, dict):
            raise ConfigError("'spec' must be a mapping")
        return spec

    @property
    def program(self) -> str:
        program = self.spec.get("program")
        if program is None or program == "":
            return DEFAULT_PROGRAM
        return str(program)

    @property
    def dedupe_edges(self) -> bool:
        value = self.spec.get("dedupeEdges", True)
        if not isinstance(value, bool):
            raise ConfigError(f"'dedupeEdges' must be true or false, got {value!r}")
        return value

    @property
    def log_level(self) -> str:
        level = str(self.spec.get("logging", {}).get("level", DEFAULT_LOG_LEVEL)).upper()
        if level not in _LOG_LEVELS:
            raise ConfigError(f"unknown log level: {level!r}")
        return level

    def validate(self) -> None:
        """Touch every setting so bad values fail at load time."""
        logging_block = self.spec.get("logging", {})
        if not isinstance(logging_block, dict):
            raise ConfigError("'logging' must be a mapping")
        _ = (self.program, self.dedupe_edges, self.log_level)

    def with_log_level(self, level: str) -> TsortConfig:
        spec = dict(self.spec)
        spec["logging"] = {**spec.get("logging", {}), "level": level}
        raw = {**self.raw, "spec": spec}
        cfg = TsortConfig(raw=raw, config_path=self.config_path)
        cfg.validate()
        return cfg

    def configure_logging(self, stream: TextIO | None = None) -> None:
        logging.basicConfig(
            stream=stream,
            level=getattr(logging, self.log_level),
            format=f"{self.program}: %(levelname)s: %(message)s",
            force=True,
        )
