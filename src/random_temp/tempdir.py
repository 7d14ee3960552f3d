"""Unique per-attempt temp directories under a shared base directory."""

from __future__ import annotations

import logging
import os
import time
from uuid import uuid4
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "rt-"


class TempDirError(OSError):
    """Temp directory for an attempt could not be created."""

    def __init__(self, path: Path, error: OSError) -> None:
        super().__init__(f"Cannot create temporary directory {path}: {error}")
        self.path = path


class TempPathGenerator:
    """Hands out never-repeating directory paths and makes sure they exist.

    Concurrent wrappers share ``base_dir`` without locking. Names combine a
    nanosecond clock, the process id and 64 random bits, so two processes only
    collide if all three match.
    """

    def __init__(self, base_dir: Path, prefix: str = DEFAULT_PREFIX) -> None:
        self.base_dir = base_dir
        self.prefix = prefix
        self._issued: list[Path] = []

    @property
    def issued(self) -> tuple[Path, ...]:
        return tuple(self._issued)

    def next_path(self) -> Path:
        path = self._candidate()
        while path in self._issued:
            path = self._candidate()
        self._issued.append(path)

        try:
            path.mkdir(exist_ok=True)
        except OSError as error:
            raise TempDirError(path, error) from error
        logger.debug("Prepared temp directory %s", path)
        return path

    def _candidate(self) -> Path:
        token = uuid4().hex[:16]
        return self.base_dir / f"{self.prefix}{time.time_ns():x}-{os.getpid():x}-{token}"
