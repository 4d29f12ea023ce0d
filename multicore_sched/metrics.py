from __future__ import annotations

from typing import List, Sequence

from .models import ProcessMetrics, ScheduleResult, SystemMetrics


def compute_system_metrics(
    result: ScheduleResult,
    core_loads: Sequence[int],
    total_power: float,
    deadline_misses: int = 0,
) -> SystemMetrics:
    """
    Compute power, throughput and utilization for a finished run.

    ``total_power`` is the running total accumulated while processes were
    assigned; it is taken as-is rather than recomputed from the reports.
    """
    num_cores = result.num_cores
    total_processes = len(result.processes)
    makespan = max(core_loads, default=0)

    throughput = total_processes / makespan if makespan > 0 else 0.0
    average_power = total_power / num_cores if num_cores > 0 else 0.0
    miss_pct = 100.0 * deadline_misses / total_processes if total_processes else 0.0

    utilization = [load / makespan if makespan > 0 else 0.0 for load in core_loads]
    avg_utilization = sum(utilization) / len(utilization) if utilization else 0.0

    summary = summarize_process_metrics(result.processes)

    system = SystemMetrics(
        num_cores=num_cores,
        total_processes=total_processes,
        total_power_consumption=total_power,
        average_power_per_core=average_power,
        makespan=makespan,
        throughput=throughput,
        deadline_misses=deadline_misses,
        deadline_miss_percentage=miss_pct,
        average_waiting_time=summary["avg_waiting"],
        average_turnaround_time=summary["avg_turnaround"],
        core_busy_times=list(core_loads),
        core_utilization=utilization,
        average_core_utilization=avg_utilization,
    )
    result.system = system
    return system


def summarize_process_metrics(processes: List[ProcessMetrics]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    if not processes:
        return {"avg_waiting": 0.0, "avg_turnaround": 0.0}

    n = len(processes)
    return {
        "avg_waiting": sum(p.waiting_time for p in processes) / n,
        "avg_turnaround": sum(p.turnaround_time for p in processes) / n,
    }

