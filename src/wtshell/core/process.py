"""Child process operations.

This module provides abstraction over launching the commands the shim wraps,
enabling dependency injection for testing without mock.patch.

Two launch modes exist:
- run(): passthrough; stdin, stdout and stderr are all inherited
- spawn(): stdout is piped to the caller for line classification; stdin and
  stderr are inherited so interactive prompts reach the terminal directly
"""

import subprocess
from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence

# Exit statuses used by POSIX shells when a command cannot be launched.
EXIT_NOT_FOUND = 127
EXIT_NOT_EXECUTABLE = 126


class LaunchError(RuntimeError):
    """Raised when a child process cannot be started.

    Attributes:
        command: The command vector that failed to launch
        reason: Human-readable cause (e.g., "command not found")
        exit_code: Nonzero status the shim should exit with
    """

    def __init__(self, command: Sequence[str], reason: str, exit_code: int) -> None:
        self.command = tuple(command)
        self.reason = reason
        self.exit_code = exit_code
        super().__init__(f"failed to launch {self.command[0]}: {reason}")


def normalize_returncode(returncode: int) -> int:
    """Map a Popen return code to a shell-style exit status.

    Popen reports death by signal N as -N; shells report it as 128 + N.
    """
    if returncode < 0:
        return 128 + -returncode
    return returncode


def wait_through_interrupts(process: subprocess.Popen[bytes]) -> int:
    """Wait for the child, ignoring interrupts delivered to this process.

    The terminal delivers SIGINT to the whole foreground process group, so the
    child receives it too and decides for itself whether to exit.
    """
    while True:
        try:
            return normalize_returncode(process.wait())
        except KeyboardInterrupt:
            continue


def _launch_error(command: Sequence[str], error: OSError) -> LaunchError:
    if isinstance(error, FileNotFoundError):
        return LaunchError(command, "command not found", EXIT_NOT_FOUND)
    if isinstance(error, PermissionError):
        return LaunchError(command, "permission denied", EXIT_NOT_EXECUTABLE)
    return LaunchError(command, error.strerror or str(error), EXIT_NOT_EXECUTABLE)


class ChildProcess(ABC):
    """A running child whose stdout is consumed line by line."""

    @abstractmethod
    def lines(self) -> Iterator[bytes]:
        """Yield stdout lines as they become available.

        Each line keeps its terminator; the last line may lack one.
        """
        ...

    @abstractmethod
    def wait(self) -> int:
        """Wait for the child to exit and return its shell-style exit status."""
        ...


class ProcessLauncher(ABC):
    """Abstract interface for launching wrapped and underlying commands."""

    @abstractmethod
    def run(self, command: Sequence[str]) -> int:
        """Run a command with fully inherited stdio and return its exit status.

        Raises:
            LaunchError: If the command cannot be started
        """
        ...

    @abstractmethod
    def spawn(self, command: Sequence[str]) -> ChildProcess:
        """Start a command with stdout piped back to the caller.

        Raises:
            LaunchError: If the command cannot be started
        """
        ...


class RealChildProcess(ChildProcess):
    """Popen-backed child process."""

    def __init__(self, process: subprocess.Popen[bytes]) -> None:
        self._process = process

    @property
    def pid(self) -> int:
        return self._process.pid

    def lines(self) -> Iterator[bytes]:
        stdout = self._process.stdout
        if stdout is None:
            return
        # readline returns as soon as a full line is available on the pipe
        for line in iter(stdout.readline, b""):
            yield line

    def wait(self) -> int:
        if self._process.stdout is not None:
            self._process.stdout.close()
        return wait_through_interrupts(self._process)


class RealProcessLauncher(ProcessLauncher):
    """Production implementation using subprocess.

    The child inherits the current environment and working directory.
    """

    def run(self, command: Sequence[str]) -> int:
        try:
            process = subprocess.Popen(list(command))
        except OSError as e:
            raise _launch_error(command, e) from e
        return wait_through_interrupts(process)

    def spawn(self, command: Sequence[str]) -> ChildProcess:
        try:
            process = subprocess.Popen(
                list(command),
                stdout=subprocess.PIPE,
                stdin=None,
                stderr=None,
            )
        except OSError as e:
            raise _launch_error(command, e) from e
        return RealChildProcess(process)
