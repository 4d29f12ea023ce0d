import pytest

from multicore_sched.algorithms import (
    run_algorithm,
    schedule_edf,
    schedule_fcfs,
    schedule_priority,
    schedule_rr,
    schedule_sjf,
)
from multicore_sched.errors import EmptyProcessSet, InvalidConfiguration, NonPositiveQuantum, UnknownAlgorithm
from multicore_sched.models import Process
from multicore_sched.timeline import TimelineRecorder


def count_deadline_misses(processes):
    return sum(
        1 for p in processes if p.deadline is not None and p.turnaround_time > p.deadline
    )


def _procs(*bursts, **kwargs):
    return [Process(i, burst_time=b, **kwargs) for i, b in enumerate(bursts, start=1)]


def _slices(result, core):
    return [(s.pid, s.duration) for s in result.timelines[core]]


def _check_invariants(result, processes):
    for p in processes:
        assert p.turnaround_time == p.waiting_time + p.burst_time
        assert p.remaining_time == 0
        assert p.core_id is not None
    for core, load in enumerate(result.system.core_busy_times):
        assert sum(s.duration for s in result.timelines[core]) == load
    assert sum(result.system.core_busy_times) == sum(p.burst_time for p in processes)


def test_fcfs_one_process_per_core():
    procs = _procs(10, 5, 8, 3)
    res = schedule_fcfs(procs, num_cores=4)
    assert [p.core_id for p in procs] == [0, 1, 2, 3]
    assert all(p.waiting_time == 0 for p in procs)
    assert [p.turnaround_time for p in procs] == [10, 5, 8, 3]
    _check_invariants(res, procs)


def test_fcfs_goes_to_least_loaded_core():
    procs = _procs(10, 5, 8, 3, 4)
    schedule_fcfs(procs, num_cores=2)
    # core0: P1(10); core1: P2(5), P3(8) -> 13; P4 goes to core0 (10 < 13)
    assert [p.core_id for p in procs] == [0, 1, 1, 0, 0]
    assert [p.waiting_time for p in procs] == [0, 0, 5, 10, 13]


def test_fcfs_ties_pick_lowest_core():
    procs = _procs(2, 2, 2)
    res = schedule_fcfs(procs, num_cores=2)
    assert [p.core_id for p in procs] == [0, 1, 0]
    assert _slices(res, 0) == [(1, 2), (3, 2)]


def test_sjf_order():
    procs = _procs(10, 5, 8, 3)
    res = schedule_sjf(procs, num_cores=1)
    assert _slices(res, 0) == [(4, 3), (2, 5), (3, 8), (1, 10)]
    assert [p.waiting_time for p in procs] == [16, 3, 8, 0]
    _check_invariants(res, procs)


def test_priority_sorted_assignment_keeps_store_order():
    procs = [
        Process(1, burst_time=4, priority=3),
        Process(2, burst_time=2, priority=1),
        Process(3, burst_time=6, priority=2),
        Process(4, burst_time=3, priority=1),
    ]
    res = schedule_priority(procs, num_cores=2)

    assert [p.id for p in procs] == [1, 2, 3, 4]
    assert [m.pid for m in res.processes] == [1, 2, 3, 4]
    assert _slices(res, 0) == [(2, 2), (3, 6)]
    assert _slices(res, 1) == [(4, 3), (1, 4)]
    assert [p.waiting_time for p in procs] == [3, 0, 2, 0]
    _check_invariants(res, procs)


def test_priority_ties_keep_insertion_order():
    procs = _procs(3, 1, 2, priority=5)
    res = schedule_priority(procs, num_cores=1)
    assert [pid for pid, _ in _slices(res, 0)] == [1, 2, 3]


def test_edf_counts_missed_deadline():
    procs = [Process(1, burst_time=5, deadline=3), Process(2, burst_time=2, deadline=10)]
    res = schedule_edf(procs, num_cores=1)

    assert _slices(res, 0) == [(1, 5), (2, 2)]
    assert procs[0].turnaround_time == 5
    assert procs[1].turnaround_time == 7
    assert res.system.deadline_misses == 1
    assert res.missed_deadlines == [1]
    assert res.system.deadline_miss_percentage == pytest.approx(50.0)


def test_edf_no_deadline_runs_first_and_never_misses():
    procs = [
        Process(1, burst_time=4, deadline=5),
        Process(2, burst_time=9),
        Process(3, burst_time=1, deadline=2),
    ]
    res = schedule_edf(procs, num_cores=1)
    assert [pid for pid, _ in _slices(res, 0)] == [2, 3, 1]
    assert res.missed_deadlines == [3, 1]
    assert res.system.deadline_misses == count_deadline_misses(res.processes) == 2


def test_edf_miss_is_logged(caplog):
    procs = [Process(1, burst_time=5, deadline=3)]
    with caplog.at_level("WARNING"):
        schedule_edf(procs, num_cores=1)
    assert "P1 missed its deadline" in caplog.text


def test_rr_time_slices_per_core():
    procs = _procs(5, 3)
    res = schedule_rr(procs, num_cores=2, quantum=2)

    assert _slices(res, 0) == [(1, 2), (1, 2), (1, 1)]
    assert _slices(res, 1) == [(2, 2), (2, 1)]
    assert (procs[0].turnaround_time, procs[0].waiting_time) == (5, 0)
    assert (procs[1].turnaround_time, procs[1].waiting_time) == (3, 0)
    _check_invariants(res, procs)


def test_rr_static_placement_and_interleaving():
    procs = _procs(3, 4, 2)
    res = schedule_rr(procs, num_cores=2, quantum=2)

    # P1 and P3 share core 0, P2 stays alone on core 1
    assert [p.core_id for p in procs] == [0, 1, 0]
    assert _slices(res, 0) == [(1, 2), (3, 2), (1, 1)]
    assert _slices(res, 1) == [(2, 2), (2, 2)]
    assert procs[0].turnaround_time == 5
    assert procs[0].waiting_time == 2
    assert procs[2].turnaround_time == 4
    assert procs[2].waiting_time == 2
    _check_invariants(res, procs)


def test_rr_large_quantum_runs_each_process_once():
    procs = _procs(4, 6, 2)
    res = schedule_rr(procs, num_cores=2, quantum=10)
    assert _slices(res, 0) == [(1, 4), (3, 2)]
    assert _slices(res, 1) == [(2, 6)]
    _check_invariants(res, procs)


@pytest.mark.parametrize("quantum", [None, 0, -3])
def test_rr_rejects_non_positive_quantum(quantum):
    procs = _procs(5)
    with pytest.raises(NonPositiveQuantum):
        schedule_rr(procs, num_cores=1, quantum=quantum)


def test_empty_process_set_rejected():
    with pytest.raises(EmptyProcessSet):
        schedule_fcfs([], num_cores=2)


def test_invalid_core_count_rejected():
    with pytest.raises(InvalidConfiguration):
        schedule_fcfs(_procs(1), num_cores=17)


def test_runs_do_not_leak_state():
    procs = _procs(5, 3)
    timeline = TimelineRecorder(2)
    schedule_rr(procs, num_cores=2, quantum=1, timeline=timeline)
    res = schedule_fcfs(procs, num_cores=1, timeline=timeline)

    assert timeline.num_cores == 1
    assert [(s.pid, s.duration) for s in timeline.slices(0)] == [(1, 5), (2, 3)]
    assert res.system.total_power_consumption == pytest.approx(0.8)
    assert procs[1].waiting_time == 5


@pytest.mark.parametrize("name", ["fcfs", "sjf", "priority", "edf", "rr"])
def test_every_algorithm_satisfies_invariants(name):
    procs = [
        Process(1, burst_time=7, priority=2, deadline=9),
        Process(2, burst_time=3, priority=0, deadline=4),
        Process(3, burst_time=5, priority=2),
        Process(4, burst_time=1, priority=9, deadline=20),
        Process(5, burst_time=6, priority=1, deadline=8),
    ]
    res = run_algorithm(name, procs, num_cores=3, quantum=2)
    _check_invariants(res, procs)
    assert res.system.total_processes == 5


def test_unknown_algorithm():
    with pytest.raises(UnknownAlgorithm):
        run_algorithm("mlfq", _procs(1), num_cores=1)
