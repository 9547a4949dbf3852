"""
Library settings and logging setup.

Settings are plain dataclasses with defaults suitable for desk use.
EngineSettings can also be read from the environment:
- RATESCALC_MAX_WORKERS: number of threads used by the calculation runner
- RATESCALC_LOG_LEVEL: logging level name
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class EngineSettings:
    """
    Settings for the calculation runner.

    Attributes:
        max_workers: Threads used to execute tasks (1 = run in the caller's thread)
        log_level: Logging level name applied by configure_logging
    """
    max_workers: int = 1
    log_level: str = "WARNING"

    def __post_init__(self):
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, was {self.max_workers}")

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """Create settings from RATESCALC_* environment variables."""
        max_workers = int(os.environ.get("RATESCALC_MAX_WORKERS", "1"))
        log_level = os.environ.get("RATESCALC_LOG_LEVEL", "WARNING").upper()
        return cls(max_workers=max_workers, log_level=log_level)


@dataclass(frozen=True)
class CalibrationSettings:
    """
    Settings for curve calibration.

    Attributes:
        tolerance: Maximum absolute residual accepted for any node
        max_iterations: Maximum number of function evaluations of the solver
        method: scipy.optimize.root method name
    """
    tolerance: float = 1e-10
    max_iterations: int = 200
    method: str = "hybr"


def configure_logging(
    level: Optional[str] = None,
    fmt: str = DEFAULT_LOG_FORMAT,
    datefmt: str = DEFAULT_DATE_FORMAT,
) -> None:
    """
    Configure root logging for scripts and notebooks using the library.

    Args:
        level: Level name, defaults to EngineSettings.from_env().log_level
        fmt: Log record format
        datefmt: Timestamp format
    """
    if level is None:
        level = EngineSettings.from_env().log_level
    logging.basicConfig(level=level.upper(), format=fmt, datefmt=datefmt, force=True)


__all__ = [
    "EngineSettings",
    "CalibrationSettings",
    "configure_logging",
    "DEFAULT_LOG_FORMAT",
]
