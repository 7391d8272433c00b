"""Directory-change directive protocol.

The wrapped command asks the calling shell to change directory by printing a
single line on stdout:

    CD:<path>

Everything after the 3-character prefix, up to the line terminator, is the
target path. There is no escaping, so a path containing a newline cannot be
represented.
"""

import sys
from typing import TextIO

DIRECTIVE_PREFIX = "CD:"
DIRECTIVE_PREFIX_BYTES = DIRECTIVE_PREFIX.encode("ascii")

# Paths are passed through byte-for-byte; surrogateescape keeps undecodable bytes intact.
PATH_ENCODING = "utf-8"
PATH_ERRORS = "surrogateescape"


def strip_terminator(line: bytes) -> bytes:
    """Remove a single trailing newline, if present."""
    if line.endswith(b"\n"):
        return line[:-1]
    return line


def parse_directive(line: bytes) -> str | None:
    """Return the target path if the line is a directive, otherwise None.

    A directive is the literal prefix `CD:` followed by one or more characters.
    The trailing newline is not part of the path.

    Example:
        >>> parse_directive(b"CD:/repos/project/feature\\n")
        '/repos/project/feature'
        >>> parse_directive(b"CD:\\n") is None
        True
        >>> parse_directive(b"Created worktree\\n") is None
        True
    """
    content = strip_terminator(line)
    if not content.startswith(DIRECTIVE_PREFIX_BYTES):
        return None
    target = content[len(DIRECTIVE_PREFIX_BYTES) :]
    if not target:
        return None
    return target.decode(PATH_ENCODING, errors=PATH_ERRORS)


def format_directive(path: str) -> str:
    """Build the directive line (without terminator) for a target path.

    Raises:
        ValueError: If the path is empty or contains a newline
    """
    if not path:
        raise ValueError("Directive path must not be empty")
    if "\n" in path:
        raise ValueError(f"Directive path cannot contain a newline: {path!r}")
    return f"{DIRECTIVE_PREFIX}{path}"


def emit_directive(path: str, stream: TextIO | None = None) -> None:
    """Write a directive line for `path` and flush.

    Intended for wrapped commands written in Python. Emit at most one directive,
    as the last relevant output of the command.
    """
    out = stream if stream is not None else sys.stdout
    out.write(format_directive(path) + "\n")
    out.flush()
