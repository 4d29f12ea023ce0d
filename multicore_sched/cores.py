from __future__ import annotations

import logging
from typing import List, Sequence

from .models import Process
from .timeline import TimelineRecorder

logger = logging.getLogger(__name__)


class CoreLoadTracker:
    """
    Cumulative committed busy time for each core within one run.
    """

    def __init__(self, num_cores: int) -> None:
        self._loads: List[int] = [0] * num_cores

    @property
    def loads(self) -> Sequence[int]:
        return tuple(self._loads)

    def __getitem__(self, core: int) -> int:
        return self._loads[core]

    def least_loaded(self) -> int:
        """
        Index of the core with the smallest load; ties go to the lowest index.
        """
        best = 0
        for core in range(1, len(self._loads)):
            if self._loads[core] < self._loads[best]:
                best = core
        return best

    def advance(self, core: int, duration: int) -> int:
        self._loads[core] += duration
        return self._loads[core]


def assign_greedy(process: Process, loads: CoreLoadTracker, timeline: TimelineRecorder) -> int:
    """
    Run ``process`` to completion on the least-loaded core.

    Sets the process's core, waiting and turnaround times, appends its slice
    to the core's timeline and advances the core's load. Returns the core.
    """
    core = loads.least_loaded()
    process.core_id = core
    process.waiting_time = loads[core]
    process.turnaround_time = process.waiting_time + process.burst_time
    process.remaining_time = 0

    timeline.record(core, process.id, process.burst_time)
    loads.advance(core, process.burst_time)

    logger.debug(
        "%s -> core %d (wait=%d, turnaround=%d)",
        process.label,
        core,
        process.waiting_time,
        process.turnaround_time,
    )
    return core
