"""Runtime configuration read from the environment."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

DEFAULT_MAX_TRIALS = 3
DEFAULT_LOG_LEVEL = "WARNING"

ENV_EXECUTABLE = "RANDOMTEMP_EXECUTABLE"
ENV_BASE_DIR = "RANDOMTEMP_BASEDIR"
ENV_MAX_TRIALS = "RANDOMTEMP_MAXTRIAL"
ENV_LOG_LEVEL = "RANDOMTEMP_LOG_LEVEL"


@dataclass(slots=True, frozen=True)
class Settings:
    """Wrapper settings collected once at startup."""

    executable: str | None = None
    base_dir: Path = Path()
    max_trials: int = DEFAULT_MAX_TRIALS
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        cwd: Path | None = None,
    ) -> Settings:
        """Load settings from environment, falling back to defaults for bad values."""

        env = os.environ if environ is None else environ
        base_dir_raw = env.get(ENV_BASE_DIR, "").strip()
        working_dir = (cwd or Path.cwd()).absolute()
        # always absolute: relative TMP values break once the child changes directory
        base_dir = working_dir / base_dir_raw if base_dir_raw else working_dir
        return cls(
            executable=env.get(ENV_EXECUTABLE, "").strip() or None,
            base_dir=base_dir,
            max_trials=parse_max_trials(env.get(ENV_MAX_TRIALS)),
            log_level=parse_log_level(env.get(ENV_LOG_LEVEL)),
        )


@dataclass(slots=True, frozen=True)
class LaunchConfig:
    """Immutable description of what to launch and how often to try."""

    executable: str
    args: tuple[str, ...]
    base_dir: Path
    max_trials: int = DEFAULT_MAX_TRIALS

    def __post_init__(self) -> None:
        if self.max_trials < 1:
            raise ValueError(f"max_trials must be >= 1, got {self.max_trials}")


def parse_max_trials(raw: str | None) -> int:
    """Parse the trial bound; unset, non-numeric or non-positive values give the default."""

    if raw is None:
        return DEFAULT_MAX_TRIALS
    try:
        value = int(raw.strip())
    except ValueError:
        return DEFAULT_MAX_TRIALS
    if value <= 0:
        return DEFAULT_MAX_TRIALS
    return value


def parse_log_level(raw: str | None) -> str:
    if not raw or not raw.strip():
        return DEFAULT_LOG_LEVEL
    name = raw.strip().upper()
    if isinstance(logging.getLevelName(name), int):
        return name
    return DEFAULT_LOG_LEVEL
