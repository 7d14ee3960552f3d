"""Bounded retry loop: one fresh temp directory per attempt, sequential attempts."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from random_temp.config import LaunchConfig
from random_temp.runner import RunOutcome
from random_temp.tempdir import TempDirError, TempPathGenerator

logger = logging.getLogger(__name__)

# sysexits.h EX_CANTCREAT
EXIT_TEMPDIR_FAILURE = 73


class Runner(Protocol):
    """Anything that can launch one attempt."""

    def run(self, executable: str, args: tuple[str, ...], temp_path: Path) -> RunOutcome:
        """Launch ``executable`` with temp variables pointing at ``temp_path``."""


@dataclass(slots=True, frozen=True)
class Attempting:
    trial_index: int


@dataclass(slots=True, frozen=True)
class Succeeded:
    exit_code: int = 0


@dataclass(slots=True, frozen=True)
class ExhaustedFailed:
    outcome: RunOutcome


RetryState = Attempting | Succeeded | ExhaustedFailed


@dataclass(slots=True, frozen=True)
class Attempt:
    """One iteration of the loop and what came of it."""

    trial_index: int
    temp_path: Path
    outcome: RunOutcome


@dataclass(slots=True)
class RetryResult:
    state: Succeeded | ExhaustedFailed
    attempts: list[Attempt] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        if isinstance(self.state, Succeeded):
            return self.state.exit_code
        return self.state.outcome.exit_code


class RetryController:
    """Drive ``Attempting(0) -> ... -> Succeeded | ExhaustedFailed``.

    Every failure kind (non-zero exit, spawn failure, temp directory failure)
    spends one trial. Only a zero exit stops early.
    """

    def __init__(
        self,
        config: LaunchConfig,
        runner: Runner,
        paths: TempPathGenerator | None = None,
    ) -> None:
        self.config = config
        self.runner = runner
        self.paths = paths or TempPathGenerator(config.base_dir)
        self.attempts: list[Attempt] = []

    def run(self) -> RetryResult:
        self.attempts = []
        state: RetryState = Attempting(0)
        while isinstance(state, Attempting):
            state = self.step(state)
        return RetryResult(state=state, attempts=list(self.attempts))

    def step(self, state: Attempting) -> RetryState:
        """Perform one attempt and return the next state."""

        trial_index = state.trial_index
        if trial_index > 0:
            logger.info("Retry attempt: %d of %d", trial_index, self.config.max_trials - 1)

        outcome, temp_path = self._attempt()
        self.attempts.append(Attempt(trial_index, temp_path, outcome))

        if outcome.succeeded:
            return Succeeded(outcome.exit_code)
        if outcome.is_spawn_failure:
            logger.warning("Attempt %d failed: %s", trial_index + 1, outcome.spawn_error)
        else:
            logger.info("Attempt %d exited with code %d", trial_index + 1, outcome.exit_code)

        if trial_index + 1 < self.config.max_trials:
            return Attempting(trial_index + 1)
        return ExhaustedFailed(outcome)

    def _attempt(self) -> tuple[RunOutcome, Path]:
        try:
            temp_path = self.paths.next_path()
        except TempDirError as error:
            return RunOutcome.spawn_failed(str(error), EXIT_TEMPDIR_FAILURE), error.path

        logger.debug("Launching %s with temp directory %s", self.config.executable, temp_path)
        outcome = self.runner.run(self.config.executable, self.config.args, temp_path)
        return outcome, temp_path
