"""Post-exit director: apply the pending directive once the child has exited."""

import logging
from pathlib import Path

import click

from wtshell.cli.output import user_output
from wtshell.core.directory import DirectoryOps
from wtshell.core.splitter import SplitResult

logger = logging.getLogger(__name__)


class PostExitDirector:
    """Changes the owning shell's directory to the pending directive's target.

    Must only be given a SplitResult, which exists once the child is reaped, so
    the change never overlaps in-flight output.

    Args:
        directory_ops: How to check and change the working directory
        strict: Treat more than one directive as a protocol violation and skip
            the change instead of following the last one
        warn_stale: Print a warning when the target is not a directory instead
            of skipping silently
    """

    def __init__(
        self,
        directory_ops: DirectoryOps,
        *,
        strict: bool = False,
        warn_stale: bool = False,
    ) -> None:
        self._directory_ops = directory_ops
        self._strict = strict
        self._warn_stale = warn_stale

    def apply(self, result: SplitResult) -> Path | None:
        """Apply the pending directive, if any.

        Returns:
            The directory changed to, or None when no change was made
        """
        if result.directive is None:
            return None

        if self._strict and result.directive_count > 1:
            user_output(
                click.style("Error: ", fg="red")
                + f"received {result.directive_count} directory directives, expected at most one"
            )
            return None

        target = Path(result.directive)
        if not self._directory_ops.is_directory(target):
            logger.debug("Skipping directory change, not a directory: %s", target)
            if self._warn_stale:
                user_output(click.style("Warning: ", fg="yellow") + f"directory not found: {target}")
            return None

        try:
            self._directory_ops.change_directory(target)
        except OSError as e:
            logger.debug("Directory change to %s failed: %s", target, e)
            return None

        logger.debug("Changed directory to %s", target)
        return target
