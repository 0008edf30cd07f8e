import logging
import os
from pathlib import Path
from typing import List, Optional, Tuple

import matplotlib

matplotlib.use("Agg")  # Must be set before importing pyplot
import matplotlib.pyplot as plt  # noqa: E402

from taskorder.models import Schedule  # noqa: E402

logger = logging.getLogger("taskorder.visualization")


def _ensure_dir(path: str):
    if path:
        os.makedirs(path, exist_ok=True)


def next_unique_path(path: str | Path) -> str:
    """Append _1, _2 ... to the file stem until the path is free."""
    p = Path(path)
    if not p.exists():
        return str(p)
    counter = 1
    while True:
        candidate = p.parent / f"{p.stem}_{counter}{p.suffix}"
        if not candidate.exists():
            return str(candidate)
        counter += 1


def save_gantt_chart(
    schedule: Schedule,
    filepath: str,
    title: Optional[str] = None,
    show_legend: Optional[bool] = None,
) -> str:
    """Render the modeled schedule as a Gantt chart and save it.

    Rows are workers when every row carries one (worker-pool model), task
    indices otherwise. Returns the path written.
    """
    rows = schedule.rows
    by_worker = bool(rows) and all(r.worker is not None for r in rows)
    lanes = sorted({r.worker if by_worker else r.task for r in rows})
    lane_pos = {lane: i for i, lane in enumerate(lanes)}
    n_tasks = max((r.task for r in rows), default=-1) + 1

    fig, ax = plt.subplots(
        figsize=(10, min(0.5 * max(len(lanes), 1) + 2, 16)),
        constrained_layout=True,
    )
    cmap = matplotlib.colormaps["tab20"]
    colors = [cmap(i % 20) for i in range(max(n_tasks, 1))]
    for r in rows:
        y = lane_pos[r.worker if by_worker else r.task]
        ax.barh(
            y,
            r.duration,
            left=r.start,
            height=0.8,
            color=colors[r.task],
            alpha=0.85,
            edgecolor="black",
            linewidth=0.6,
        )
        if r.duration:
            ax.text(r.start + r.duration / 2, y, str(r.task), ha="center", va="center", fontsize=8)
    ax.set_xlabel("Time", fontsize=12)
    ax.set_ylabel("Worker" if by_worker else "Task", fontsize=12)
    ax.set_title(title or f"Gantt Chart - finish = {schedule.finish_time}", fontsize=14)
    ax.set_yticks(range(len(lanes)))
    ax.set_yticklabels([f"W{lane}" if by_worker else f"T{lane}" for lane in lanes])
    ax.grid(True, alpha=0.25, axis="x", linestyle="--", linewidth=0.7)
    ax.set_ylim(-0.5, max(len(lanes), 1) - 0.5)

    if show_legend is None:
        show_legend = by_worker and n_tasks <= 40
    if show_legend:
        legend_elements = [
            plt.Rectangle(
                (0, 0), 1, 1, facecolor=colors[i], alpha=0.85, edgecolor="black", label=f"Task {i}"
            )
            for i in range(n_tasks)
        ]
        ax.legend(
            handles=legend_elements,
            bbox_to_anchor=(1.02, 1),
            loc="upper left",
            borderaxespad=0.0,
            fontsize=8,
            frameon=False,
        )

    _ensure_dir(os.path.dirname(filepath))
    fig.savefig(filepath, dpi=180)
    plt.close(fig)
    logger.info("Gantt chart saved as: %s", filepath)
    return filepath


def save_convergence_plot(history: List[Tuple[int, int]], filepath: str) -> str:
    """Plot best finish time against permutations examined."""
    fig, ax = plt.subplots(figsize=(10, 6), constrained_layout=True)
    if history:
        evaluated, times = zip(*history)
        ax.step(evaluated, times, where="post", linewidth=1.6, marker="o", markersize=3)
    ax.set_xlabel("Permutations examined", fontsize=12)
    ax.set_ylabel("Best finish time", fontsize=12)
    ax.set_title("Search convergence", fontsize=14)
    ax.grid(True, alpha=0.3, linestyle="--")

    _ensure_dir(os.path.dirname(filepath))
    fig.savefig(filepath, dpi=150)
    plt.close(fig)
    logger.info("Convergence plot saved as: %s", filepath)
    return filepath
