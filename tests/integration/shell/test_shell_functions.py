"""Run the rendered integration functions under real shells.

Each test puts a fake `git-wt` (and a fake `git`) first on PATH, loads the
rendered function into a fresh shell, and reports the shell's working
directory and status afterwards.
"""

import os
import shutil
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

from wtshell.cli.shell_integration.render import render_integration
from wtshell.core.global_config import GlobalConfig

SHELLS = [
    pytest.param(
        "bash",
        marks=pytest.mark.skipif(shutil.which("bash") is None, reason="bash not installed"),
    ),
    pytest.param(
        "zsh",
        marks=pytest.mark.skipif(shutil.which("zsh") is None, reason="zsh not installed"),
    ),
    pytest.param(
        "fish",
        marks=pytest.mark.skipif(shutil.which("fish") is None, reason="fish not installed"),
    ),
]

_NO_STARTUP_FILES = {
    "bash": ("--norc", "--noprofile"),
    "zsh": ("-f",),
    "fish": ("--no-config",),
}


def _write_executable(bin_dir: Path, name: str, body: str) -> None:
    script = bin_dir / name
    script.write_text(
        f"#!{sys.executable}\nimport sys\n" + textwrap.dedent(body), encoding="utf-8"
    )
    script.chmod(0o755)


def _driver(shell: str, integration: Path, start: Path, invocation: str) -> str:
    if shell == "fish":
        return (
            f"source {integration}\n"
            f"cd {start}\n"
            f"{invocation}\n"
            "set -l rc $status\n"
            "printf 'PWD=%s\\nEXIT=%s\\n' $PWD $rc\n"
        )
    return (
        f'eval "$(cat {integration})"\n'
        f"cd {start}\n"
        f"{invocation}\n"
        "rc=$?\n"
        "printf 'PWD=%s\\nEXIT=%s\\n' \"$PWD\" \"$rc\"\n"
    )


def _run(shell: str, tmp_path: Path, invocation: str) -> tuple[list[str], Path, int]:
    integration = tmp_path / f"integration.{shell}"
    integration.write_text(render_integration(shell, GlobalConfig()), encoding="utf-8")
    start = tmp_path / "start"
    start.mkdir(exist_ok=True)

    env = dict(os.environ, PATH=f"{tmp_path / 'bin'}{os.pathsep}{os.environ['PATH']}")
    result = subprocess.run(
        [shell, *_NO_STARTUP_FILES[shell], "-c", _driver(shell, integration, start, invocation)],
        capture_output=True,
        text=True,
        env=env,
        check=False,
        timeout=60,
    )
    lines = result.stdout.splitlines()
    status = dict(line.split("=", 1) for line in lines[-2:])
    return lines[:-2], Path(status["PWD"]), int(status["EXIT"])


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    path = tmp_path / "bin"
    path.mkdir()
    _write_executable(
        path,
        "git",
        """\
        print("real git " + " ".join(sys.argv[1:]))
        sys.exit(5)
        """,
    )
    return path


@pytest.mark.parametrize("shell", SHELLS)
def test_directive_changes_directory_and_is_hidden(
    shell: str, tmp_path: Path, bin_dir: Path
) -> None:
    target = tmp_path / "worktrees" / "feature"
    target.mkdir(parents=True)
    _write_executable(
        bin_dir,
        "git-wt",
        f"""\
        print("line 1")
        print("line 2")
        print("CD:{target}")
        print("line 3")
        """,
    )

    output, cwd, exit_code = _run(shell, tmp_path, "git wt switch feature")

    assert output == ["line 1", "line 2", "line 3"]
    assert cwd.resolve() == target.resolve()
    assert exit_code == 0


@pytest.mark.parametrize("shell", SHELLS)
def test_no_directive_keeps_directory(shell: str, tmp_path: Path, bin_dir: Path) -> None:
    _write_executable(bin_dir, "git-wt", "print('Fetching from origin...')\n")

    output, cwd, exit_code = _run(shell, tmp_path, "git wt fetch")

    assert output == ["Fetching from origin..."]
    assert cwd.resolve() == (tmp_path / "start").resolve()
    assert exit_code == 0


@pytest.mark.parametrize("shell", SHELLS)
def test_nonexistent_target_is_ignored(shell: str, tmp_path: Path, bin_dir: Path) -> None:
    _write_executable(bin_dir, "git-wt", "print('CD:/nonexistent/path')\n")

    output, cwd, exit_code = _run(shell, tmp_path, "git wt switch gone")

    assert output == []
    assert cwd.resolve() == (tmp_path / "start").resolve()
    assert exit_code == 0


@pytest.mark.parametrize("shell", SHELLS)
def test_wrapped_exit_status_is_returned(shell: str, tmp_path: Path, bin_dir: Path) -> None:
    target = tmp_path / "repo"
    target.mkdir()
    _write_executable(bin_dir, "git-wt", f"print('CD:{target}')\nsys.exit(7)\n")

    _, cwd, exit_code = _run(shell, tmp_path, "git wt rm feature")

    assert exit_code == 7
    assert cwd.resolve() == target.resolve()


@pytest.mark.parametrize("shell", SHELLS)
def test_last_directive_wins(shell: str, tmp_path: Path, bin_dir: Path) -> None:
    first = tmp_path / "a"
    second = tmp_path / "b"
    first.mkdir()
    second.mkdir()
    _write_executable(bin_dir, "git-wt", f"print('CD:{first}')\nprint('CD:{second}')\n")

    _, cwd, _ = _run(shell, tmp_path, "git wt switch b")

    assert cwd.resolve() == second.resolve()


@pytest.mark.parametrize("shell", SHELLS)
def test_other_commands_pass_through(shell: str, tmp_path: Path, bin_dir: Path) -> None:
    _write_executable(bin_dir, "git-wt", "sys.exit(99)\n")

    output, cwd, exit_code = _run(shell, tmp_path, "git status CD:/tmp")

    assert output == ["real git status CD:/tmp"]
    assert cwd.resolve() == (tmp_path / "start").resolve()
    assert exit_code == 5
