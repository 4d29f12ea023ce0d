from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Dict, List, Optional, Sequence

from .config import validate_core_count
from .cores import CoreLoadTracker, assign_greedy
from .errors import EmptyProcessSet, NonPositiveQuantum, UnknownAlgorithm
from .metrics import compute_system_metrics
from .models import Process, ProcessMetrics, ScheduleResult
from .timeline import TimelineRecorder

logger = logging.getLogger(__name__)


class _Run:
    """
    State of a single policy run: load counters, timeline and power total.

    Creating a run resets every mutable process field and the timeline, so
    no state leaks between runs.
    """

    def __init__(
        self,
        processes: Sequence[Process],
        num_cores: int,
        timeline: Optional[TimelineRecorder] = None,
    ) -> None:
        validate_core_count(num_cores)
        if not processes:
            raise EmptyProcessSet()

        for p in processes:
            p.reset()

        self.processes = processes
        self.num_cores = num_cores
        self.loads = CoreLoadTracker(num_cores)
        self.timeline = timeline if timeline is not None else TimelineRecorder(num_cores)
        self.timeline.reset(num_cores)
        self.total_power = 0.0
        self.missed: List[int] = []

    def assign(self, process: Process) -> None:
        assign_greedy(process, self.loads, self.timeline)
        self.total_power += process.power_consumption

    def finish(self, algorithm: str, quantum: Optional[int] = None) -> ScheduleResult:
        result = ScheduleResult(
            algorithm=algorithm,
            quantum=quantum,
            num_cores=self.num_cores,
            processes=[ProcessMetrics.from_process(p) for p in self.processes],
            timelines=self.timeline.snapshot(),
            missed_deadlines=list(self.missed),
        )
        system = compute_system_metrics(
            result,
            core_loads=self.loads.loads,
            total_power=self.total_power,
            deadline_misses=len(self.missed),
        )
        logger.info(
            "%s on %d cores: %d processes, makespan %d, power %.2f",
            algorithm,
            self.num_cores,
            system.total_processes,
            system.makespan,
            system.total_power_consumption,
        )
        return result


def validate_quantum(quantum: Optional[int]) -> int:
    if isinstance(quantum, bool) or not isinstance(quantum, int) or quantum <= 0:
        raise NonPositiveQuantum(
            f"Round Robin requires a positive integer quantum, got {quantum!r}"
        )
    return quantum


def _stable_order(processes: Sequence[Process], key: Callable[[Process], int]) -> List[int]:
    # sorted() is stable, so equal keys keep insertion order.
    return sorted(range(len(processes)), key=lambda i: key(processes[i]))


def schedule_fcfs(
    processes: Sequence[Process],
    num_cores: int,
    quantum: Optional[int] = None,
    timeline: Optional[TimelineRecorder] = None,
) -> ScheduleResult:
    """
    Load-balanced First-Come First-Serve.

    Processes are taken in insertion order and each one runs to completion on
    whichever core currently has the least committed work.
    """
    run = _Run(processes, num_cores, timeline)
    for p in processes:
        run.assign(p)
    return run.finish("FCFS")


def schedule_sjf(
    processes: Sequence[Process],
    num_cores: int,
    quantum: Optional[int] = None,
    timeline: Optional[TimelineRecorder] = None,
) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive), load-balanced across cores.
    """
    run = _Run(processes, num_cores, timeline)
    for i in _stable_order(processes, lambda p: p.burst_time):
        run.assign(processes[i])
    return run.finish("SJF")


def schedule_priority(
    processes: Sequence[Process],
    num_cores: int,
    quantum: Optional[int] = None,
    timeline: Optional[TimelineRecorder] = None,
) -> ScheduleResult:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority; equal priorities keep
    insertion order. Only the assignment order changes, the records stay in
    place.
    """
    run = _Run(processes, num_cores, timeline)
    for i in _stable_order(processes, lambda p: p.priority):
        run.assign(processes[i])
    return run.finish("Priority")


def schedule_edf(
    processes: Sequence[Process],
    num_cores: int,
    quantum: Optional[int] = None,
    timeline: Optional[TimelineRecorder] = None,
) -> ScheduleResult:
    """
    Earliest Deadline First.

    Processes without a deadline (0) sort first and are never counted as
    misses. A process misses when its turnaround time exceeds its deadline.
    """
    run = _Run(processes, num_cores, timeline)
    for i in _stable_order(processes, lambda p: p.deadline):
        p = processes[i]
        run.assign(p)
        if p.has_deadline and p.turnaround_time > p.deadline:
            run.missed.append(p.id)
            logger.warning(
                "%s missed its deadline (turnaround %d > deadline %d)",
                p.label,
                p.turnaround_time,
                p.deadline,
            )
    return run.finish("EDF")


def schedule_rr(
    processes: Sequence[Process],
    num_cores: int,
    quantum: Optional[int] = None,
    timeline: Optional[TimelineRecorder] = None,
) -> ScheduleResult:
    """
    Multi-core Round Robin with a fixed time quantum.

    Process ``i`` is pinned to core ``i % num_cores``. Each round visits the
    cores in index order and runs one quantum from the front of every
    non-empty queue; unfinished processes go to the back of their own core's
    queue. Each core's clock only advances by its own slices.
    """
    validate_quantum(quantum)
    run = _Run(processes, num_cores, timeline)

    queues: List[Deque[Process]] = [deque() for _ in range(num_cores)]
    for i, p in enumerate(processes):
        queues[i % num_cores].append(p)

    rounds = 0
    while any(queues):
        rounds += 1
        for core, queue in enumerate(queues):
            if not queue:
                continue

            p = queue.popleft()
            run_time = min(quantum, p.remaining_time)
            run.timeline.record(core, p.id, run_time)
            p.remaining_time -= run_time
            clock = run.loads.advance(core, run_time)

            if p.remaining_time > 0:
                queue.append(p)
                continue

            p.core_id = core
            p.turnaround_time = clock
            p.waiting_time = p.turnaround_time - p.burst_time
            run.total_power += p.power_consumption
            logger.debug(
                "%s finished on core %d at t=%d (wait=%d)",
                p.label,
                core,
                clock,
                p.waiting_time,
            )

    logger.debug("Round Robin completed in %d rounds", rounds)
    return run.finish("Round Robin", quantum=quantum)


ALGORITHMS: Dict[str, Callable[..., ScheduleResult]] = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "priority": schedule_priority,
    "edf": schedule_edf,
    "rr": schedule_rr,
}


def run_algorithm(
    name: str,
    processes: Sequence[Process],
    num_cores: int,
    quantum: Optional[int] = None,
    timeline: Optional[TimelineRecorder] = None,
) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise UnknownAlgorithm(
            f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})"
        )

    func = ALGORITHMS[name]
    return func(processes, num_cores, quantum=quantum, timeline=timeline)
