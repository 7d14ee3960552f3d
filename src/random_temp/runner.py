"""Launch the wrapped program with its temp variables redirected."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127
_SIGNAL_EXIT_BASE = 128


@dataclass(slots=True, frozen=True)
class RunOutcome:
    """Result of one launch: a process exit code or a reason it never started."""

    exit_code: int
    spawn_error: str | None = None

    @classmethod
    def exited(cls, returncode: int) -> RunOutcome:
        if returncode < 0:
            return cls(exit_code=_SIGNAL_EXIT_BASE - returncode)
        return cls(exit_code=returncode)

    @classmethod
    def spawn_failed(cls, reason: str, exit_code: int = EXIT_NOT_FOUND) -> RunOutcome:
        return cls(exit_code=exit_code, spawn_error=reason)

    @property
    def is_spawn_failure(self) -> bool:
        return self.spawn_error is not None

    @property
    def succeeded(self) -> bool:
        return not self.is_spawn_failure and self.exit_code == 0


def temp_env_names(os_name: str | None = None) -> tuple[str, ...]:
    """Environment variables that tools consult for their temp directory."""

    if (os_name or os.name) == "nt":
        return ("TMP", "TEMP")
    return ("TMPDIR", "TMP", "TEMP")


def build_child_env(
    base_env: Mapping[str, str],
    temp_path: Path,
    os_name: str | None = None,
) -> dict[str, str]:
    env = dict(base_env)
    for name in temp_env_names(os_name):
        env[name] = str(temp_path)
    return env


def find_executable(
    name: str,
    *,
    path: str | None,
    exclude: Iterable[Path] = (),
) -> str | None:
    """Search ``path`` entries in order for ``name``, skipping any file listed in ``exclude``."""

    excluded = {_real(item) for item in exclude}
    if not path:
        return None
    for directory in path.split(os.pathsep):
        if not directory:
            continue
        found = shutil.which(name, path=directory)
        if found is not None and _real(Path(found)) not in excluded:
            return found
    return None


def _real(path: Path) -> Path:
    try:
        return path.resolve()
    except OSError:
        return path.absolute()


class ProcessRunner:
    """Run one child at a time with inherited stdio and wait for it to finish."""

    def __init__(
        self,
        *,
        os_name: str | None = None,
        environ: Mapping[str, str] | None = None,
        exclude: Iterable[Path] = (),
    ) -> None:
        self.os_name = os_name or os.name
        self.environ = os.environ if environ is None else environ
        self.exclude = tuple(exclude)

    def run(self, executable: str, args: Sequence[str], temp_path: Path) -> RunOutcome:
        env = build_child_env(self.environ, temp_path, self.os_name)

        program = self._locate(executable, env)
        if program is None:
            return RunOutcome.spawn_failed(f"{executable}: command not found", EXIT_NOT_FOUND)

        try:
            process = subprocess.Popen([program, *args], env=env)  # noqa: S603
        except FileNotFoundError as error:
            return RunOutcome.spawn_failed(f"{executable}: {error.strerror}", EXIT_NOT_FOUND)
        except PermissionError as error:
            return RunOutcome.spawn_failed(f"{executable}: {error.strerror}", EXIT_NOT_EXECUTABLE)
        except OSError as error:
            return RunOutcome.spawn_failed(f"{executable}: {error}", EXIT_NOT_FOUND)

        return RunOutcome.exited(_wait(process))

    def _locate(self, executable: str, env: Mapping[str, str]) -> str | None:
        """Return a launchable path, or ``None`` when a bare name is nowhere on PATH."""

        if _has_directory(executable, self.os_name):
            return executable
        return find_executable(
            executable,
            path=_env_lookup(env, "PATH", self.os_name),
            exclude=self.exclude,
        )


def _wait(process: subprocess.Popen[bytes]) -> int:
    # Ctrl+C reaches the child too; let it finish before unwinding
    try:
        return process.wait()
    except KeyboardInterrupt:
        process.wait()
        raise


def _has_directory(executable: str, os_name: str) -> bool:
    if os_name == "nt":
        return "/" in executable or "\\" in executable
    return "/" in executable


def _env_lookup(env: Mapping[str, str], name: str, os_name: str) -> str | None:
    if name in env:
        return env[name]
    if os_name == "nt":
        for key, value in env.items():
            if key.upper() == name:
                return value
    return None
