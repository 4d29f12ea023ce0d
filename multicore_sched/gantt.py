from __future__ import annotations

from typing import Dict, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import TimelineSlice
from .timeline import cumulative_markers

# Characters per time unit.
SCALE = 2


def _marker_line(slices: Sequence[TimelineSlice]) -> str:
    line = "0"
    for sl, mark in zip(slices, cumulative_markers(slices)[1:]):
        line += str(mark).rjust(sl.duration * SCALE + 1)
    return line


def render_gantt(timelines: Sequence[Sequence[TimelineSlice]]) -> str:
    """
    Plain-text Gantt chart, one block per core.
    """
    if not any(timelines):
        return "(no execution)"

    lines = ["Gantt Chart:"]
    for core, slices in enumerate(timelines):
        lines.append(f"Core {core}:")
        if not slices:
            lines.append("  (idle)")
            continue

        border = " " + " ".join("-" * (sl.duration * SCALE) for sl in slices)
        labels = "|" + "|".join(f"P{sl.pid}".center(sl.duration * SCALE) for sl in slices) + "|"
        lines.extend([border, labels, border, _marker_line(slices)])

    return "\n".join(lines)


def build_rich_gantt(timelines: Sequence[Sequence[TimelineSlice]]) -> Panel:
    """
    Build a Rich Panel with a colored Gantt row, labels and time marks per core.
    """
    if not any(timelines):
        return Panel("No execution", title="Gantt Chart")

    colors = ["red", "green", "yellow", "blue", "magenta", "cyan"]
    pid_to_color: Dict[int, str] = {}

    def pid_color(pid: int) -> str:
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(colors)
            pid_to_color[pid] = colors[idx]
        return pid_to_color[pid]

    table = Table.grid(padding=(0, 1))
    table.add_column(justify="right", style="bold")
    table.add_column()

    for core, slices in enumerate(timelines):
        bar = Text()
        labels = Text()
        for sl in slices:
            width = sl.duration * SCALE
            bar.append(" " * width, style=f"on {pid_color(sl.pid)}")
            labels.append(f"P{sl.pid}"[:width].ljust(width), style="bold")

        table.add_row(f"Core {core}", bar if slices else Text("idle", style="dim"))
        if slices:
            table.add_row("", labels)
            table.add_row("", Text(_marker_line(slices), style="dim"))

    return Panel.fit(table, title="Gantt Chart")
