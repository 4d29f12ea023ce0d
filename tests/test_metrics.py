import pytest

from multicore_sched.algorithms import schedule_fcfs, schedule_rr
from multicore_sched.metrics import compute_system_metrics, summarize_process_metrics
from multicore_sched.models import Process, ScheduleResult


def test_fcfs_system_metrics():
    procs = [Process(i, burst_time=b) for i, b in enumerate([10, 5, 8, 3], start=1)]
    sys = schedule_fcfs(procs, num_cores=4).system

    assert sys.num_cores == 4
    assert sys.total_processes == 4
    assert sys.total_power_consumption == pytest.approx(2.6)
    assert sys.average_power_per_core == pytest.approx(0.65)
    assert sys.makespan == 10
    assert sys.throughput == pytest.approx(0.4)
    assert sys.deadline_misses == 0
    assert sys.deadline_miss_percentage == 0.0
    assert sys.average_waiting_time == 0.0
    assert sys.average_turnaround_time == pytest.approx(6.5)
    assert sys.core_busy_times == [10, 5, 8, 3]
    assert sys.core_utilization == pytest.approx([1.0, 0.5, 0.8, 0.3])
    assert sys.average_core_utilization == pytest.approx(0.65)


def test_rr_metrics_with_idle_core():
    procs = [Process(1, burst_time=5), Process(2, burst_time=3)]
    sys = schedule_rr(procs, num_cores=3, quantum=2).system
    assert sys.core_busy_times == [5, 3, 0]
    assert sys.makespan == 5
    assert sys.throughput == pytest.approx(0.4)
    assert sys.core_utilization[2] == 0.0
    assert sys.average_power_per_core == pytest.approx(0.8 / 3)


def test_empty_result_metrics_are_zero():
    result = ScheduleResult(algorithm="FCFS", quantum=None, num_cores=2)
    sys = compute_system_metrics(result, core_loads=[0, 0], total_power=0.0)
    assert sys.makespan == 0
    assert sys.throughput == 0.0
    assert sys.deadline_miss_percentage == 0.0
    assert sys.average_waiting_time == 0.0
    assert result.system is sys


def test_summarize_empty():
    assert summarize_process_metrics([]) == {"avg_waiting": 0.0, "avg_turnaround": 0.0}
