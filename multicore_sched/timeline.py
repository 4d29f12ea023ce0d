from __future__ import annotations

from typing import List, Sequence

from .models import TimelineSlice


def cumulative_markers(slices: Sequence[TimelineSlice]) -> List[int]:
    """
    Cumulative time at every slice boundary, starting at 0.
    """
    marks = [0]
    for s in slices:
        marks.append(marks[-1] + s.duration)
    return marks


class TimelineRecorder:
    """
    Per-core Gantt data: an ordered list of committed slices for every core.
    """

    def __init__(self, num_cores: int) -> None:
        self._cores: List[List[TimelineSlice]] = [[] for _ in range(num_cores)]

    @property
    def num_cores(self) -> int:
        return len(self._cores)

    def reset(self, num_cores: int | None = None) -> None:
        """
        Drop every slice, optionally resizing to ``num_cores`` cores.
        """
        if num_cores is None:
            num_cores = len(self._cores)
        self._cores = [[] for _ in range(num_cores)]

    def record(self, core: int, pid: int, duration: int) -> None:
        self._cores[core].append(TimelineSlice(pid=pid, duration=duration))

    def slices(self, core: int) -> Sequence[TimelineSlice]:
        return tuple(self._cores[core])

    def total(self, core: int) -> int:
        return sum(s.duration for s in self._cores[core])

    def markers(self, core: int) -> List[int]:
        return cumulative_markers(self._cores[core])

    def is_empty(self) -> bool:
        return not any(self._cores)

    def snapshot(self) -> List[List[TimelineSlice]]:
        return [list(core) for core in self._cores]
