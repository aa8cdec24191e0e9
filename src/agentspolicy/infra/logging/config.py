from __future__ import annotations

"""
Logging Configuration for the policy resolver.

The resolver is quiet by default: only warnings (invalid exclusion
patterns, configuration constraints) and build failures reach the
terminal. '--debug' surfaces every index build, link hop and resolution
decision, and '--log-file' keeps a rotating on-disk trace of them.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

# Severity names accepted in LoggingConfig.level
_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

QUIET_LEVEL = "WARNING"
TRACE_LEVEL = "DEBUG"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Logging settings for one resolver process.

    Attributes:
        level: Minimum severity captured. Resolution traces are DEBUG.
        console: Mirror records to stderr, keeping stdout clean for reports.
        log_file: Rotating trace file, or None for terminal only.
        max_bytes: Trace file size before rotation.
        backup_count: Rotated trace files kept.
        console_fmt: Terminal record format.
        file_fmt: Trace file record format; includes the emitting module.
        datefmt: Timestamp format for the trace file.
    """
    level: str = QUIET_LEVEL
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024
    backup_count: int = 2

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def for_cli(cls, debug: bool = False, log_file: Optional[str] = None) -> "LoggingConfig":
        """Settings derived from the '--debug' and '--log-file' flags."""
        return cls(level=TRACE_LEVEL if debug else QUIET_LEVEL, console=True, log_file=log_file or None)
