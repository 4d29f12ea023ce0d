from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from .algorithms import ALGORITHMS, run_algorithm, validate_quantum
from .config import DEFAULT_NUM_CORES, DEFAULT_PRIORITY, DEFAULT_QUANTUM, EXAMPLE_BURST_TIMES, validate_core_count
from .errors import EmptyProcessSet
from .models import Process, ProcessDescriptor, ScheduleResult
from .timeline import TimelineRecorder

logger = logging.getLogger(__name__)


class MultiCoreScheduler:
    """
    Owns the process store, the core count and the timeline recorder.

    Process ids are handed out sequentially from 1 in insertion order and
    restart after :meth:`clear_processes` or :meth:`reconfigure`.
    """

    def __init__(self, num_cores: int = DEFAULT_NUM_CORES) -> None:
        self._num_cores = validate_core_count(num_cores)
        self._processes: List[Process] = []
        self._next_id = 1
        self.timeline = TimelineRecorder(self._num_cores)
        self.last_result: Optional[ScheduleResult] = None

    @property
    def num_cores(self) -> int:
        return self._num_cores

    @property
    def processes(self) -> Sequence[Process]:
        return tuple(self._processes)

    def __len__(self) -> int:
        return len(self._processes)

    def add_process(
        self,
        burst_time: int,
        priority: int = DEFAULT_PRIORITY,
        deadline: int = 0,
        is_real_time: bool = False,
    ) -> Process:
        descriptor = ProcessDescriptor(
            burst_time=burst_time,
            priority=priority,
            deadline=deadline,
            is_real_time=is_real_time,
        )
        return self.add_descriptor(descriptor)

    def add_descriptor(self, descriptor: ProcessDescriptor) -> Process:
        process = Process.from_descriptor(self._next_id, descriptor)
        self._processes.append(process)
        self._next_id += 1
        logger.debug("Added %s (burst=%d)", process.label, process.burst_time)
        return process

    def add_descriptors(self, descriptors: Iterable[ProcessDescriptor]) -> List[Process]:
        return [self.add_descriptor(d) for d in descriptors]

    def clear_processes(self) -> None:
        self._processes.clear()
        self._next_id = 1
        self.timeline.reset()
        self.last_result = None

    def reconfigure(self, num_cores: int) -> None:
        """
        Switch to ``num_cores`` cores. Clears every process.

        An invalid count raises before anything changes.
        """
        validate_core_count(num_cores)
        self._num_cores = num_cores
        self.clear_processes()
        self.timeline = TimelineRecorder(num_cores)
        logger.info("Reconfigured to %d cores", num_cores)

    def load_example_data(self) -> List[Process]:
        self.clear_processes()
        return [self.add_process(burst) for burst in EXAMPLE_BURST_TIMES]

    def run(self, algorithm: str, quantum: Optional[int] = None) -> ScheduleResult:
        if not self._processes:
            raise EmptyProcessSet()
        result = run_algorithm(
            algorithm,
            self._processes,
            self._num_cores,
            quantum=quantum,
            timeline=self.timeline,
        )
        self.last_result = result
        return result

    def fcfs(self) -> ScheduleResult:
        return self.run("fcfs")

    def sjf(self) -> ScheduleResult:
        return self.run("sjf")

    def priority(self) -> ScheduleResult:
        return self.run("priority")

    def edf(self) -> ScheduleResult:
        return self.run("edf")

    def round_robin(self, quantum: int) -> ScheduleResult:
        return self.run("rr", quantum=quantum)

    def compare(self, quantum: int = DEFAULT_QUANTUM) -> List[ScheduleResult]:
        """
        Run every policy over the current processes, in registry order.

        A bad quantum or an empty store is rejected before any policy runs.
        """
        validate_quantum(quantum)
        if not self._processes:
            raise EmptyProcessSet()

        results = []
        for name in ALGORITHMS:
            q = quantum if name == "rr" else None
            results.append(self.run(name, quantum=q))
        return results
