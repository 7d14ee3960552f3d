"""Shared test fixtures."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from random_temp.config import ENV_BASE_DIR, ENV_EXECUTABLE, ENV_LOG_LEVEL, ENV_MAX_TRIALS

_FLAKY_SCRIPT = textwrap.dedent(
    """\
    import os
    import sys
    from pathlib import Path

    state_dir = Path(sys.argv[1])
    succeed_on = int(sys.argv[2])
    counter = state_dir / "calls"
    calls = int(counter.read_text()) + 1 if counter.exists() else 1
    counter.write_text(str(calls))
    with (state_dir / "temp_dirs.log").open("a", encoding="utf-8") as handle:
        handle.write(os.environ["TMP"] + "\\n")
    sys.exit(0 if succeed_on and calls >= succeed_on else 1)
    """
)


@pytest.fixture(autouse=True)
def clean_randomtemp_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's RANDOMTEMP_* settings out of tests."""
    for name in (ENV_EXECUTABLE, ENV_BASE_DIR, ENV_MAX_TRIALS, ENV_LOG_LEVEL):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def flaky_script(tmp_path: Path) -> tuple[Path, Path]:
    """Script that exits 1 until its N-th call (argv: state dir, N; N=0 never succeeds)."""
    script = tmp_path / "flaky.py"
    script.write_text(_FLAKY_SCRIPT, "utf-8")
    state_dir = tmp_path / "state"
    state_dir.mkdir()
    return script, state_dir
