from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS
from .config import DEFAULT_NUM_CORES, DEFAULT_PRIORITY, DEFAULT_QUANTUM, MAX_CORES, MIN_CORES
from .errors import SchedulerError
from .gantt import build_rich_gantt
from .models import ScheduleResult
from .scheduler import MultiCoreScheduler
from .workload_io import load_workload

logger = logging.getLogger(__name__)


def _add_workload_args(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--workload",
        "-w",
        help="Path to JSON or CSV workload file.",
    )
    source.add_argument(
        "--example",
        action="store_true",
        help="Use the built-in example workload (burst times 10, 5, 8, 3).",
    )
    parser.add_argument(
        "--cores",
        "-c",
        type=int,
        default=DEFAULT_NUM_CORES,
        help=f"Number of cores, {MIN_CORES}-{MAX_CORES} (default: {DEFAULT_NUM_CORES}).",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="multicore-scheduler",
        description="Multi-core CPU scheduling simulator (FCFS, SJF, Priority, EDF, RR).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help=f"Algorithm to use ({', '.join(ALGORITHMS)}).",
    )
    _add_workload_args(run_parser)
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round-robin (ignored by the other algorithms).",
    )
    run_parser.add_argument(
        "--step",
        action="store_true",
        help="Show a simple time-stepped simulation in the terminal.",
    )
    run_parser.add_argument(
        "--step-delay",
        type=float,
        default=0.3,
        help="Seconds to wait between steps when --step is used (default: 0.3).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run every algorithm on the same workload and compare summary metrics.",
    )
    _add_workload_args(compare_parser)
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for RR (default: {DEFAULT_QUANTUM}).",
    )

    menu_parser = subparsers.add_parser(
        "menu",
        help="Interactive menu to add processes and pick an algorithm at runtime.",
    )
    menu_parser.add_argument(
        "--cores",
        "-c",
        type=int,
        default=DEFAULT_NUM_CORES,
        help=f"Initial number of cores (default: {DEFAULT_NUM_CORES}).",
    )
    menu_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Default quantum to prefill for RR (default: {DEFAULT_QUANTUM}).",
    )

    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


def _print_result(result: ScheduleResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    console.print(f"[bold]Cores:[/bold] {result.num_cores}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()
    console.print(build_rich_gantt(result.timelines))
    console.print()

    headers = ["PID", "Core", "Burst", "Priority", "Deadline", "Wait", "Turnaround", "Power"]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Core"} else "right"
        proc_table.add_column(h, justify=justify)

    missed = set(result.missed_deadlines)
    for p in result.processes:
        deadline = "none" if p.deadline is None else str(p.deadline)
        if p.pid in missed:
            deadline = f"[red]{deadline} (missed)[/red]"
        proc_table.add_row(
            f"P{p.pid}" + ("*" if p.is_real_time else ""),
            "-" if p.core_id is None else str(p.core_id),
            str(p.burst_time),
            str(p.priority),
            deadline,
            str(p.waiting_time),
            str(p.turnaround_time),
            f"{p.power_consumption:.2f}",
        )

    console.print(proc_table)
    console.print()

    if result.system:
        sys = result.system
        sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
        sys_table.add_column("Metric")
        sys_table.add_column("Value", justify="right")

        sys_table.add_row("Cores", str(sys.num_cores))
        sys_table.add_row("Avg waiting", f"{sys.average_waiting_time:.2f}")
        sys_table.add_row("Avg turnaround", f"{sys.average_turnaround_time:.2f}")
        sys_table.add_row("Makespan", str(sys.makespan))
        sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
        sys_table.add_row("Total power", f"{sys.total_power_consumption:.2f}")
        sys_table.add_row("Avg power per core", f"{sys.average_power_per_core:.2f}")
        sys_table.add_row("Core utilization", f"{sys.average_core_utilization*100:.1f}%")
        sys_table.add_row("Deadline misses", str(sys.deadline_misses))
        sys_table.add_row("Deadline miss rate", f"{sys.deadline_miss_percentage:.1f}%")

        console.print(sys_table)


def _print_compare(results: List[ScheduleResult], console: Console, title: str) -> None:
    summary_table = Table(title=title, box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Makespan", justify="right")
    summary_table.add_column("Throughput", justify="right")
    summary_table.add_column("Misses", justify="right")

    for result in results:
        sys = result.system
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{sys.average_waiting_time:.2f}",
            f"{sys.average_turnaround_time:.2f}",
            str(sys.makespan),
            f"{sys.throughput:.3f}",
            str(sys.deadline_misses),
        )

    console.print(summary_table)


def _animate_result(result: ScheduleResult, delay: float, console: Console) -> None:
    """
    Simple time-stepped textual simulation using the computed schedule.
    """
    if result.system is None or result.system.makespan == 0:
        console.print("[red]No execution to animate.[/red]")
        return

    # (start, end, pid) per core
    spans = []
    for slices in result.timelines:
        t = 0
        core_spans = []
        for sl in slices:
            core_spans.append((t, t + sl.duration, sl.pid))
            t += sl.duration
        spans.append(core_spans)

    makespan = result.system.makespan
    console.print(f"[bold]Simulating {result.algorithm}[/bold] (duration {makespan} time units)")
    console.print("[dim]Press Ctrl+C to skip animation.[/dim]")

    for t in range(makespan):
        cells = []
        for core_spans in spans:
            running = next((f"P{pid}" for start, end, pid in core_spans if start <= t < end), None)
            cells.append(f"[green]{running:>4}[/green]" if running else "[dim]idle[/dim]")
        console.print(f"t={t:3d}: " + " ".join(cells))
        time.sleep(delay)


def _load_scheduler(args: argparse.Namespace) -> MultiCoreScheduler:
    scheduler = MultiCoreScheduler(args.cores)
    if args.example:
        scheduler.load_example_data()
    else:
        scheduler.add_descriptors(load_workload(Path(args.workload)))
    return scheduler


def _prompt_int(prompt: str, default: Optional[int]) -> Optional[int]:
    raw = input(prompt).strip()
    if not raw:
        return default
    return int(raw)


def _interactive_menu(num_cores: int, default_quantum: int) -> None:
    console = Console()
    scheduler = MultiCoreScheduler(num_cores)
    alg_choices = list(ALGORITHMS.keys())

    while True:
        console.print("\n[bold cyan]Multi-core Scheduler Menu[/bold cyan] [dim](q to quit)[/dim]")
        console.print(
            f"[bold]Cores:[/bold] [green]{scheduler.num_cores}[/green]   "
            f"[bold]Processes:[/bold] [green]{len(scheduler)}[/green]"
        )
        console.print("  [yellow]a[/yellow]. Add a process")
        console.print("  [yellow]e[/yellow]. Load example data")
        console.print("  [yellow]w[/yellow]. Load workload file")
        console.print("  [yellow]c[/yellow]. Change core count (clears processes)")
        console.print("  [yellow]x[/yellow]. Clear processes")
        for idx, alg in enumerate(alg_choices, start=1):
            console.print(f"  [yellow]{idx}[/yellow]. Run [white]{alg}[/white]")
        compare_idx = len(alg_choices) + 1
        console.print(f"  [yellow]{compare_idx}[/yellow]. [white]Compare all[/white]")

        choice = input(f"Choice [a/e/w/c/x/1-{compare_idx} or q]: ").strip().lower()
        if choice in {"q", "quit", "exit"}:
            return

        try:
            if choice == "a":
                burst = _prompt_int("Burst time: ", None)
                priority = _prompt_int(f"Priority [{DEFAULT_PRIORITY}]: ", DEFAULT_PRIORITY)
                deadline = _prompt_int("Deadline [0 = none]: ", 0)
                rt = input("Real-time? [Enter=no, y=yes]: ").strip().lower() == "y"
                if burst is None:
                    console.print("[red]Burst time is required.[/red]")
                    continue
                p = scheduler.add_process(burst, priority=priority, deadline=deadline, is_real_time=rt)
                console.print(f"Added [green]{p.label}[/green]")
                continue
            if choice == "e":
                scheduler.load_example_data()
                console.print("Loaded example data (burst times 10, 5, 8, 3).")
                continue
            if choice == "w":
                path = Path(input("Workload path: ").strip())
                if not path.exists():
                    console.print(f"[red]Workload not found: {path}[/red]")
                    continue
                descriptors = load_workload(path)
                scheduler.clear_processes()
                added = scheduler.add_descriptors(descriptors)
                console.print(f"Loaded {len(added)} processes from [green]{path}[/green]")
                continue
            if choice == "c":
                n = _prompt_int(f"Cores [{MIN_CORES}-{MAX_CORES}]: ", scheduler.num_cores)
                scheduler.reconfigure(n)
                console.print(f"Now using {scheduler.num_cores} cores; processes cleared.")
                continue
            if choice == "x":
                scheduler.clear_processes()
                console.print("Processes cleared.")
                continue

            alg_idx = int(choice) - 1
            if alg_idx < 0:
                raise IndexError(f"no menu entry {choice}")
            if alg_idx == compare_idx - 1:
                q_val = _prompt_int(f"Quantum for rr [{default_quantum}]: ", default_quantum)
                _print_compare(scheduler.compare(q_val), console, "Algorithm comparison")
                continue

            alg = alg_choices[alg_idx]
            quantum = None
            if alg == "rr":
                quantum = _prompt_int(f"Quantum for rr [{default_quantum}]: ", default_quantum)
            _print_result(scheduler.run(alg, quantum=quantum), console)
        except (OSError, ValueError, IndexError) as exc:
            # SchedulerError is a ValueError
            console.print(f"[red]Error: {escape(str(exc))}[/red]")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    console = Console()

    try:
        if args.command == "run":
            scheduler = _load_scheduler(args)
            result = scheduler.run(args.algorithm, quantum=args.quantum)
            if args.step:
                try:
                    _animate_result(result, delay=args.step_delay, console=console)
                except KeyboardInterrupt:
                    console.print("[yellow]Animation skipped.[/yellow]")
            _print_result(result, console)
            return 0

        if args.command == "compare":
            scheduler = _load_scheduler(args)
            results = scheduler.compare(args.quantum)
            _print_compare(results, console, f"Algorithm comparison ({scheduler.num_cores} cores)")
            return 0

        if args.command == "menu":
            _interactive_menu(args.cores, args.quantum)
            return 0
    except SchedulerError as exc:
        logger.debug("Run rejected", exc_info=True)
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2
    except (OSError, ValueError) as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
