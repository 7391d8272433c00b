"""Application context with dependency injection."""

import os
from dataclasses import dataclass
from pathlib import Path

from wtshell.core.directory import DirectoryOps, HandoffDirectoryOps, RealDirectoryOps
from wtshell.core.global_config import GlobalConfig, load_global_config
from wtshell.core.process import ProcessLauncher, RealProcessLauncher

CD_FILE_ENV_VAR = "WTSHELL_CD_FILE"


@dataclass(frozen=True)
class WtShellContext:
    """Immutable context holding all dependencies for wtshell operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    launcher: ProcessLauncher
    directory_ops: DirectoryOps
    global_config: GlobalConfig

    @staticmethod
    def for_test(
        launcher: ProcessLauncher | None = None,
        directory_ops: DirectoryOps | None = None,
        global_config: GlobalConfig | None = None,
    ) -> "WtShellContext":
        """Create a context with in-memory fakes for anything not provided.

        Example:
            >>> from tests.fakes.process import FakeProcessLauncher
            >>> launcher = FakeProcessLauncher(stdout_lines=[b"CD:/repo\\n"])
            >>> ctx = WtShellContext.for_test(launcher=launcher)
        """
        from tests.fakes.directory import FakeDirectoryOps
        from tests.fakes.process import FakeProcessLauncher

        return WtShellContext(
            launcher=launcher if launcher is not None else FakeProcessLauncher(),
            directory_ops=directory_ops if directory_ops is not None else FakeDirectoryOps(),
            global_config=global_config if global_config is not None else GlobalConfig(),
        )


def create_context(config_path: Path | None = None) -> WtShellContext:
    """Create production context with real implementations.

    Directory changes go to the handoff file named by WTSHELL_CD_FILE when it
    is set (the process was started by a shell function), otherwise they apply
    to this process.

    Raises:
        ValueError: If the global config file is invalid
    """
    handoff = os.environ.get(CD_FILE_ENV_VAR)
    directory_ops: DirectoryOps
    if handoff:
        directory_ops = HandoffDirectoryOps(Path(handoff))
    else:
        directory_ops = RealDirectoryOps()

    return WtShellContext(
        launcher=RealProcessLauncher(),
        directory_ops=directory_ops,
        global_config=load_global_config(config_path),
    )
