"""
Error types raised by the lockfile diff engine.
"""


class LockdiffError(Exception):
    """Base class for all errors raised by lockdiff."""


class MalformedInput(LockdiffError, ValueError):
    """A document could not be parsed as a lockfile."""


class SchemaViolation(LockdiffError, ValueError):
    """A parsed lockfile does not have the shape the engine relies on."""
