"""Decide which program the wrapper stands in for."""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from random_temp.config import Settings

_WINDOWS_EXECUTABLE_SUFFIXES: tuple[str, ...] = (".exe", ".bat", ".cmd", ".com")
_SCRIPT_SUFFIXES: tuple[str, ...] = (".py", ".pyw")


class ResolutionSource(str, Enum):
    """Where the executable name came from."""

    ENVIRONMENT = "environment"
    ARGUMENT = "argument"
    PROGRAM_NAME = "program_name"


@dataclass(slots=True, frozen=True)
class ResolvedCommand:
    """Executable to launch plus the arguments forwarded to it."""

    executable: str
    args: tuple[str, ...]
    source: ResolutionSource


def program_stem(program: str | Path, *, os_name: str | None = None) -> str:
    """Return the base name of ``program`` without directory or executable suffix."""

    current_os_name = os_name or os.name
    name = str(program)
    separators = "/\\" if current_os_name == "nt" else "/"
    for separator in separators:
        name = name.rsplit(separator, 1)[-1]
    suffixes = _SCRIPT_SUFFIXES
    if current_os_name == "nt":
        suffixes = _WINDOWS_EXECUTABLE_SUFFIXES + _SCRIPT_SUFFIXES
    lowered = name.lower()
    for suffix in suffixes:
        if lowered.endswith(suffix) and len(name) > len(suffix):
            return name[: -len(suffix)]
    return name


class ExecutableResolver:
    """Resolve the target from the environment, the first argument or the wrapper's own name.

    Resolution never fails. A name that does not exist surfaces later as a
    spawn failure of each attempt, and a bare name that points back at the
    wrapper is skipped by the launch-time PATH scan.
    """

    def __init__(
        self,
        settings: Settings,
        argv: Sequence[str],
        current_program: str | Path,
        *,
        os_name: str | None = None,
    ) -> None:
        self.settings = settings
        self.argv = tuple(argv)
        self.current_program = current_program
        self.os_name = os_name or os.name

    def resolve(self) -> ResolvedCommand:
        executable = self.settings.executable
        if executable:
            return ResolvedCommand(executable, self.argv, ResolutionSource.ENVIRONMENT)

        if self.argv:
            return ResolvedCommand(self.argv[0], self.argv[1:], ResolutionSource.ARGUMENT)

        own_stem = program_stem(self.current_program, os_name=self.os_name)
        return ResolvedCommand(own_stem, (), ResolutionSource.PROGRAM_NAME)
