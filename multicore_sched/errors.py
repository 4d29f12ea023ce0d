from __future__ import annotations


class SchedulerError(ValueError):
    """Base class for recoverable simulator errors."""


class InvalidConfiguration(SchedulerError):
    """Core count outside the supported range."""


class InvalidProcess(SchedulerError):
    """Process descriptor with an out-of-range field."""


class EmptyProcessSet(SchedulerError):
    """A policy was run with no processes loaded."""

    def __init__(self, message: str = "No processes loaded. Add processes first.") -> None:
        super().__init__(message)


class NonPositiveQuantum(SchedulerError):
    """Round-robin quantum missing or not a positive integer."""


class UnknownAlgorithm(SchedulerError):
    """Requested scheduling policy does not exist."""
