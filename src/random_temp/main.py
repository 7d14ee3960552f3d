"""CLI entrypoint for random-temp."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import rich_click as click

from random_temp.config import LaunchConfig, Settings
from random_temp.resolver import ExecutableResolver
from random_temp.retry import RetryController
from random_temp.runner import ProcessRunner

LOG_FORMAT = "random-temp: %(levelname)s: %(message)s"
RAW_ARGS_KEY = "random_temp.raw_args"


def run(config: LaunchConfig, runner: ProcessRunner | None = None) -> int:
    """Launch ``config`` with retries and return the exit code to propagate."""

    result = RetryController(config, runner or ProcessRunner()).run()
    return result.exit_code


def build_launch_config(
    settings: Settings,
    argv: tuple[str, ...],
    current_program: str,
) -> LaunchConfig:
    resolved = ExecutableResolver(settings, argv, current_program).resolve()
    return LaunchConfig(
        executable=resolved.executable,
        args=resolved.args,
        base_dir=settings.base_dir,
        max_trials=settings.max_trials,
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


class PassthroughCommand(click.RichCommand):
    """Command that hands its raw argument list to the callback untouched.

    Click still parses the tokens, but the parser drops a leading `--`, so the
    forwarded arguments come from `ctx.meta[RAW_ARGS_KEY]` instead.
    """

    def main(self, *args, **kwargs):
        kwargs.setdefault("windows_expand_args", False)
        return super().main(*args, **kwargs)

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        ctx.meta[RAW_ARGS_KEY] = tuple(args)
        return super().parse_args(ctx, args)


@click.command(
    cls=PassthroughCommand,
    context_settings={
        "ignore_unknown_options": True,
        "allow_extra_args": True,
        "allow_interspersed_args": False,
        "help_option_names": [],
    },
)
@click.pass_context
def random_temp(ctx: click.Context) -> None:
    """Run a program with TMP/TEMP set to a fresh unique directory, retrying on failure.

    Every argument is forwarded untouched. The target comes from
    `RANDOMTEMP_EXECUTABLE`, else the first argument, else this program's own name.
    """

    settings = Settings.from_env()
    configure_logging(settings.log_level)

    current_program = sys.argv[0] if sys.argv and sys.argv[0] else ctx.info_name or "random-temp"
    config = build_launch_config(settings, ctx.meta[RAW_ARGS_KEY], current_program)
    runner = ProcessRunner(exclude=_own_files(current_program))
    ctx.exit(run(config, runner))


def _own_files(current_program: str) -> tuple[Path, ...]:
    program = Path(current_program)
    if program.exists():
        return (program,)
    return ()


if __name__ == "__main__":  # pragma: no cover
    random_temp()
