from __future__ import annotations

import allure
import pytest

from random_temp.config import Settings
from random_temp.resolver import (
    ExecutableResolver,
    ResolutionSource,
    ResolvedCommand,
    program_stem,
)

pytestmark = [
    allure.epic("Launch"),
    allure.feature("Executable Resolution"),
]


def _resolve(
    argv: tuple[str, ...],
    *,
    executable: str | None = None,
    current_program: str = "/usr/local/bin/random-temp",
    os_name: str = "posix",
) -> ResolvedCommand:
    return ExecutableResolver(
        Settings(executable=executable),
        argv,
        current_program,
        os_name=os_name,
    ).resolve()


def test_first_argument_names_executable_when_override_unset() -> None:
    resolved = _resolve(("echo", "hello", "--flag", "a b"))

    assert resolved.executable == "echo"
    assert resolved.args == ("hello", "--flag", "a b")
    assert resolved.source is ResolutionSource.ARGUMENT


def test_environment_override_keeps_every_argument() -> None:
    resolved = _resolve(("echo", "hello"), executable="/usr/bin/cc")

    assert resolved.executable == "/usr/bin/cc"
    assert resolved.args == ("echo", "hello")
    assert resolved.source is ResolutionSource.ENVIRONMENT


def test_falls_back_to_own_program_name_without_arguments() -> None:
    resolved = _resolve((), current_program="/opt/wrappers/gcc")

    assert resolved == ResolvedCommand("gcc", (), ResolutionSource.PROGRAM_NAME)


def test_own_program_name_drops_windows_suffix() -> None:
    resolved = _resolve((), current_program="C:\\tools\\wrap\\CL.EXE", os_name="nt")
    assert resolved.executable == "CL"


def test_override_naming_the_wrapped_tool_by_absolute_path_is_honoured() -> None:
    resolved = _resolve(
        ("-c", "foo.c"),
        executable="/usr/bin/gcc",
        current_program="/opt/wrappers/gcc",
    )

    assert resolved.executable == "/usr/bin/gcc"
    assert resolved.args == ("-c", "foo.c")
    assert resolved.source is ResolutionSource.ENVIRONMENT


def test_override_sharing_the_wrapper_stem_is_honoured_on_windows() -> None:
    resolved = _resolve(
        ("/c", "a.c"),
        executable="cl.exe",
        current_program="C:\\tools\\cl.exe",
        os_name="nt",
    )

    assert resolved.executable == "cl.exe"
    assert resolved.args == ("/c", "a.c")
    assert resolved.source is ResolutionSource.ENVIRONMENT


@pytest.mark.parametrize(
    ("program", "os_name", "expected"),
    [
        ("/usr/bin/gcc", "posix", "gcc"),
        ("/usr/bin/gcc-12", "posix", "gcc-12"),
        ("/home/me/bin/random-temp.py", "posix", "random-temp"),
        ("/usr/bin/tool.exe", "posix", "tool.exe"),
        ("C:\\bin\\cl.exe", "nt", "cl"),
        ("C:/bin/build.cmd", "nt", "build"),
        ("nmake.Bat", "nt", "nmake"),
        (".exe", "nt", ".exe"),
    ],
)
def test_program_stem(program: str, os_name: str, expected: str) -> None:
    assert program_stem(program, os_name=os_name) == expected
