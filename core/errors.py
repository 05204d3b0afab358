"""Error types raised by the modwatch pipeline.

Every fatal condition is a ``ModwatchError`` subclass carrying the process
exit code; the CLI is the only place that catches them.
"""


class ModwatchError(Exception):
    """Base class for fatal pipeline errors."""

    exit_code = 1


class UsageError(ModwatchError):
    """No repository location was given."""

    exit_code = 2


class InvalidReference(ModwatchError):
    """Repository location does not look like a GitHub repository URL."""


class RetrievalError(ModwatchError):
    """The manifest could not be fetched or cloned."""


class ManifestReadError(ModwatchError):
    """The manifest exists but could not be read."""


class ResolutionError(ModwatchError):
    """``go list`` failed or its output could not be obtained."""
