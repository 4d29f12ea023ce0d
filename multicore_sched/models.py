from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .config import DEFAULT_PRIORITY, MAX_PRIORITY, MIN_PRIORITY, POWER_PER_TIME_UNIT
from .errors import InvalidProcess


def _validate_fields(burst_time: int, priority: int, deadline: int) -> None:
    if burst_time <= 0:
        raise InvalidProcess(f"Burst time must be positive, got {burst_time}")
    if not MIN_PRIORITY <= priority <= MAX_PRIORITY:
        raise InvalidProcess(
            f"Priority must be between {MIN_PRIORITY} and {MAX_PRIORITY}, got {priority}"
        )
    if deadline < 0:
        raise InvalidProcess(f"Deadline must be >= 0 (0 means none), got {deadline}")


@dataclass(frozen=True)
class ProcessDescriptor:
    """
    Input record for one process before it is given an id.
    """

    burst_time: int
    priority: int = DEFAULT_PRIORITY
    deadline: int = 0
    is_real_time: bool = False

    def __post_init__(self) -> None:
        _validate_fields(self.burst_time, self.priority, self.deadline)


@dataclass
class Process:
    """
    A simulated unit of work plus the results of the latest run.

    ``deadline == 0`` means the process has no deadline. ``core_id`` is None
    until a run assigns the process to a core.
    """

    id: int
    burst_time: int
    priority: int = DEFAULT_PRIORITY
    deadline: int = 0
    is_real_time: bool = False
    power_consumption: float = field(init=False)

    waiting_time: int = field(default=0, init=False)
    turnaround_time: int = field(default=0, init=False)
    remaining_time: int = field(init=False)
    core_id: Optional[int] = field(default=None, init=False)

    def __post_init__(self) -> None:
        if self.id <= 0:
            raise InvalidProcess(f"Process id must be positive, got {self.id}")
        _validate_fields(self.burst_time, self.priority, self.deadline)
        self.power_consumption = POWER_PER_TIME_UNIT * self.burst_time
        self.remaining_time = self.burst_time

    @classmethod
    def from_descriptor(cls, pid: int, descriptor: ProcessDescriptor) -> "Process":
        return cls(
            id=pid,
            burst_time=descriptor.burst_time,
            priority=descriptor.priority,
            deadline=descriptor.deadline,
            is_real_time=descriptor.is_real_time,
        )

    @property
    def label(self) -> str:
        return f"P{self.id}"

    @property
    def has_deadline(self) -> bool:
        return self.deadline > 0

    def reset(self) -> None:
        self.waiting_time = 0
        self.turnaround_time = 0
        self.remaining_time = self.burst_time
        self.core_id = None


@dataclass(frozen=True)
class TimelineSlice:
    """
    One committed execution segment on a core's Gantt chart.
    """

    pid: int
    duration: int


@dataclass
class ProcessMetrics:
    pid: int
    core_id: Optional[int]
    burst_time: int
    priority: int
    deadline: Optional[int]
    waiting_time: int
    turnaround_time: int
    power_consumption: float
    is_real_time: bool = False

    @classmethod
    def from_process(cls, p: Process) -> "ProcessMetrics":
        return cls(
            pid=p.id,
            core_id=p.core_id,
            burst_time=p.burst_time,
            priority=p.priority,
            deadline=p.deadline if p.has_deadline else None,
            waiting_time=p.waiting_time,
            turnaround_time=p.turnaround_time,
            power_consumption=p.power_consumption,
            is_real_time=p.is_real_time,
        )


@dataclass
class SystemMetrics:
    num_cores: int
    total_processes: int
    total_power_consumption: float
    average_power_per_core: float
    makespan: int
    throughput: float
    deadline_misses: int
    deadline_miss_percentage: float
    average_waiting_time: float
    average_turnaround_time: float
    core_busy_times: List[int] = field(default_factory=list)
    core_utilization: List[float] = field(default_factory=list)
    average_core_utilization: float = 0.0


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    num_cores: int
    processes: List[ProcessMetrics] = field(default_factory=list)
    timelines: List[List[TimelineSlice]] = field(default_factory=list)
    system: Optional[SystemMetrics] = None
    missed_deadlines: List[int] = field(default_factory=list)
