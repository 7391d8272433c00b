"""Working directory operations.

This module provides abstraction over changing the owning shell's working
directory, enabling dependency injection for testing without mock.patch.

Implementations:
- RealDirectoryOps: changes this process's directory (Python-hosted shells)
- HandoffDirectoryOps: records the target in a file for a calling shell
  function to `cd` into after this process exits
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path


class DirectoryOps(ABC):
    """Abstract interface for inspecting and changing the working directory."""

    @abstractmethod
    def is_directory(self, path: Path) -> bool:
        """Check whether path currently exists and is a directory."""
        ...

    @abstractmethod
    def change_directory(self, path: Path) -> None:
        """Make path the owning shell's working directory.

        Raises:
            OSError: If the change cannot be made
        """
        ...


class RealDirectoryOps(DirectoryOps):
    """Production implementation using os.chdir()."""

    def is_directory(self, path: Path) -> bool:
        return path.is_dir()

    def change_directory(self, path: Path) -> None:
        os.chdir(path)


class HandoffDirectoryOps(DirectoryOps):
    """Writes the target directory to a handoff file instead of changing directory.

    A separate process cannot change its parent shell's directory. The shell
    function generated by `wtshell init --engine python` creates the handoff
    file, runs `wtshell git ...` with WTSHELL_CD_FILE pointing at it, and
    `cd`s to its contents afterwards.
    """

    def __init__(self, handoff_path: Path) -> None:
        self._handoff_path = handoff_path

    @property
    def handoff_path(self) -> Path:
        return self._handoff_path

    def is_directory(self, path: Path) -> bool:
        return path.is_dir()

    def change_directory(self, path: Path) -> None:
        # No trailing newline: the shell reads the file with $(cat) or (cat)
        self._handoff_path.write_text(str(path), encoding="utf-8", errors="surrogateescape")
