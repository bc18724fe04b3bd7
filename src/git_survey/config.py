"""Scan configuration values built by the CLI and passed to the orchestrator."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .models import StatusOptions

LOG_LEVEL_ENV = "GIT_SURVEY_LOG"
OUTPUT_FORMATS = ("line", "json")


@dataclass(frozen=True)
class LogSettings:
    level: int = logging.WARNING


def resolve_log_level(debug: bool, environ: Mapping[str, str] | None = None) -> LogSettings:
    """Derive the log level: ``GIT_SURVEY_LOG`` wins, then the debug flag."""
    environ = os.environ if environ is None else environ
    override = environ.get(LOG_LEVEL_ENV, "").strip()
    if override:
        level = logging.getLevelName(override.upper())
        if isinstance(level, int):
            return LogSettings(level=level)
    return LogSettings(level=logging.DEBUG if debug else logging.WARNING)


@dataclass(frozen=True)
class ScanConfig:
    start_dir: Path = Path(".")
    ignore_branches: tuple[str, ...] = ()
    output_format: str = "line"
    jobs: int = 1
    options: StatusOptions = field(default_factory=StatusOptions)
    log: LogSettings = field(default_factory=LogSettings)

    def __post_init__(self) -> None:
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"unknown output format: {self.output_format!r}")
        if self.jobs < 1:
            raise ValueError("jobs must be at least 1")
