"""Dispatcher: route `git wt ...` through the shim and everything else to git."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO

import click

from wtshell.cli.output import user_output
from wtshell.core.director import PostExitDirector
from wtshell.core.process import LaunchError, ProcessLauncher
from wtshell.core.splitter import Invocation, StreamSplitter

if TYPE_CHECKING:
    from wtshell.core.context import WtShellContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShimResult:
    """Outcome of an intercepted invocation.

    Attributes:
        exit_code: Status the shim exits with (the child's, or a launch failure code)
        changed_to: Directory changed to, or None
    """

    exit_code: int
    changed_to: Path | None


class Dispatcher:
    """Interception point for the underlying version-control command.

    Created once per process and reused for every invocation; holds no state
    that changes between calls.
    """

    def __init__(
        self,
        *,
        launcher: ProcessLauncher,
        director: PostExitDirector,
        out: BinaryIO,
        underlying_command: str = "git",
        subcommand_token: str = "wt",
        wrapped_command: str = "git-wt",
    ) -> None:
        self._launcher = launcher
        self._director = director
        self._splitter = StreamSplitter(launcher, wrapped_command, out)
        self._underlying_command = underlying_command
        self._subcommand_token = subcommand_token

    @staticmethod
    def from_context(ctx: "WtShellContext", out: BinaryIO) -> "Dispatcher":
        """Build a dispatcher from the integrations and config in ctx."""
        config = ctx.global_config
        director = PostExitDirector(
            ctx.directory_ops,
            strict=config.strict_directives,
            warn_stale=config.warn_stale_directive,
        )
        return Dispatcher(
            launcher=ctx.launcher,
            director=director,
            out=out,
            underlying_command=config.underlying_command,
            subcommand_token=config.subcommand_token,
            wrapped_command=config.wrapped_command,
        )

    def is_intercepted(self, argv: Sequence[str]) -> bool:
        """Check whether argv starts with the reserved subcommand token."""
        return len(argv) > 0 and argv[0] == self._subcommand_token

    def dispatch(self, argv: Sequence[str]) -> int:
        """Handle one invocation of the underlying command and return its exit status."""
        if not self.is_intercepted(argv):
            return self.passthrough(argv)
        return self.run_shim(Invocation(args=tuple(argv[1:]))).exit_code

    def passthrough(self, argv: Sequence[str]) -> int:
        """Forward argv unmodified to the underlying command."""
        logger.debug("Passing through to %s: %s", self._underlying_command, list(argv))
        try:
            return self._launcher.run([self._underlying_command, *argv])
        except LaunchError as e:
            # Same status a shell reports for a missing or non-executable command
            user_output(f"{self._underlying_command}: {e.reason}")
            return e.exit_code

    def run_shim(self, invocation: Invocation) -> ShimResult:
        """Run the wrapped command, then apply any directive it emitted."""
        try:
            result = self._splitter.run(invocation)
        except LaunchError as e:
            user_output(click.style("Error: ", fg="red") + str(e))
            return ShimResult(exit_code=e.exit_code, changed_to=None)

        changed_to = self._director.apply(result)
        return ShimResult(exit_code=result.exit_code, changed_to=changed_to)
