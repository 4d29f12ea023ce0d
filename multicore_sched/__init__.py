"""
Multi-core CPU scheduling simulator.

Simulates FCFS, SJF, Priority, EDF and Round-Robin scheduling over a fixed
set of cores and reports per-process timings, per-core timelines and
system-wide power/throughput metrics.
"""

from .errors import (
    EmptyProcessSet,
    InvalidConfiguration,
    InvalidProcess,
    NonPositiveQuantum,
    SchedulerError,
    UnknownAlgorithm,
)
from .models import Process, ProcessDescriptor, ScheduleResult, SystemMetrics, TimelineSlice
from .scheduler import MultiCoreScheduler

__all__ = [
    "cli",
    "EmptyProcessSet",
    "InvalidConfiguration",
    "InvalidProcess",
    "MultiCoreScheduler",
    "NonPositiveQuantum",
    "Process",
    "ProcessDescriptor",
    "ScheduleResult",
    "SchedulerError",
    "SystemMetrics",
    "TimelineSlice",
    "UnknownAlgorithm",
]
