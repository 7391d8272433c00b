"""Stream splitter: run the wrapped command and partition its stdout.

stdout is consumed lazily, one line at a time. Directive lines update the
pending directive and are hidden; every other line is echoed verbatim to the
shim's stdout as soon as it arrives. stderr never passes through here: the child
inherits it directly, so prompts reach the terminal unbuffered.
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import BinaryIO

from wtshell.core.directive import parse_directive
from wtshell.core.process import ProcessLauncher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Invocation:
    """Arguments for the wrapped command, with the subcommand token removed."""

    args: tuple[str, ...]


@dataclass(frozen=True)
class SplitResult:
    """Outcome of running the wrapped command through the splitter.

    Attributes:
        exit_code: Child exit status, shell-style (128 + N for signal N)
        directive: Target of the last directive seen, or None
        directive_count: Number of directive lines seen
        interrupted: Whether an interrupt arrived while reading stdout
    """

    exit_code: int
    directive: str | None
    directive_count: int
    interrupted: bool = False


def split_lines(lines: Iterable[bytes], out: BinaryIO) -> Iterator[str]:
    """Echo passthrough lines to `out` and yield the target of each directive.

    Single pass, no lookahead: each line is classified and released before the
    next one is read. `out` is flushed after every passthrough line.

    Example:
        >>> import io
        >>> out = io.BytesIO()
        >>> list(split_lines([b"one\\n", b"CD:/tmp\\n", b"two"], out))
        ['/tmp']
        >>> out.getvalue()
        b'one\\ntwo'
    """
    for line in lines:
        target = parse_directive(line)
        if target is None:
            out.write(line)
            out.flush()
            continue
        yield target


class StreamSplitter:
    """Runs the wrapped command and collects the pending directive."""

    def __init__(self, launcher: ProcessLauncher, wrapped_command: str, out: BinaryIO) -> None:
        self._launcher = launcher
        self._wrapped_command = wrapped_command
        self._out = out

    def run(self, invocation: Invocation) -> SplitResult:
        """Run the wrapped command to completion.

        The child is always reaped before returning, including when an
        interrupt arrives mid-stream.

        Raises:
            LaunchError: If the wrapped command cannot be started
        """
        command = [self._wrapped_command, *invocation.args]
        logger.debug("Launching wrapped command: %s", command)
        child = self._launcher.spawn(command)

        directive: str | None = None
        directive_count = 0
        interrupted = False
        done = False
        while not done:
            try:
                for target in split_lines(child.lines(), self._out):
                    directive_count += 1
                    if directive is not None:
                        logger.debug("Directive %r replaces %r", target, directive)
                    directive = target
                done = True
            except KeyboardInterrupt:
                # The child got the same SIGINT; keep draining until it closes stdout.
                logger.debug("Interrupted while reading wrapped command output")
                interrupted = True

        exit_code = child.wait()
        logger.debug(
            "Wrapped command exited: exit_code=%d, directives=%d", exit_code, directive_count
        )
        return SplitResult(
            exit_code=exit_code,
            directive=directive,
            directive_count=directive_count,
            interrupted=interrupted,
        )
