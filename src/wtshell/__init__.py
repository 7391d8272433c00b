"""Shell integration for git-wt: run `git wt` and follow its directory changes."""

__version__ = "0.1.0"
