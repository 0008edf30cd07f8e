"""Finish-time estimators for a dependency-valid ordering.

Two models are available:

``index_offset``
    Walks the ordering and starts each task ``idx`` at the smallest finish
    time recorded for tasks ``idx-1 .. idx-W`` (indices below zero count as
    time 0). The result is the finish time of task ``N-1``, the highest
    index, regardless of where it sits in the ordering. Worker "slots" are
    inferred from task numbering, not from the ordering or the dependencies.

``worker_pool``
    Keeps a free-at time per worker and gives each task, in ordering
    sequence, to the worker that frees up first; a task starts once that
    worker is free and all its dependencies have finished. The result is
    the latest finish time.

``index_offset`` is the default everywhere.
"""

from __future__ import annotations

from typing import Callable, Sequence

from taskorder.models import Schedule, ScheduleRow, Task

Estimator = Callable[[Sequence[int], Sequence[Task], int], int]

DEFAULT_MODEL = "index_offset"


def _check_workers(workers: int) -> None:
    if workers < 1:
        raise ValueError(f"Worker count must be >= 1, got {workers}")


def completion_times(order: Sequence[int], tasks: Sequence[Task], workers: int) -> list[int]:
    """Completion vector of the index-offset model, indexed by task."""
    _check_workers(workers)
    times = [0] * len(tasks)
    for idx in order:
        start = min(times[idx - k] if idx - k >= 0 else 0 for k in range(1, workers + 1))
        times[idx] = start + tasks[idx].duration
    return times


def calculate_time(order: Sequence[int], tasks: Sequence[Task], workers: int) -> int:
    """Index-offset finish time: completion time of task ``N-1``."""
    times = completion_times(order, tasks, workers)
    if not times:
        return 0
    return times[-1]


def simulate_workers(order: Sequence[int], tasks: Sequence[Task], workers: int) -> Schedule:
    """Dispatch ``order`` onto ``workers`` earliest-free workers.

    Ties between equally free workers go to the lowest worker id.

    Raises:
        ValueError: If a task is reached before one of its dependencies
            (the ordering is not dependency-valid).
    """
    _check_workers(workers)
    free_at = [0] * workers
    finished: dict[int, int] = {}
    rows: list[ScheduleRow] = []
    for idx in order:
        task = tasks[idx]
        ready = 0
        for dep in task.depends:
            if dep not in finished:
                raise ValueError(f"Task {idx} scheduled before its dependency {dep}")
            ready = max(ready, finished[dep])
        worker = min(range(workers), key=free_at.__getitem__)
        start = max(free_at[worker], ready)
        end = start + task.duration
        free_at[worker] = end
        finished[idx] = end
        rows.append(
            ScheduleRow(task=idx, start=start, end=end, duration=task.duration, worker=worker)
        )
    finish_time = max((row.end for row in rows), default=0)
    return Schedule(rows=rows, finish_time=finish_time)


def worker_pool_time(order: Sequence[int], tasks: Sequence[Task], workers: int) -> int:
    return simulate_workers(order, tasks, workers).finish_time


ESTIMATORS: dict[str, Estimator] = {
    "index_offset": calculate_time,
    "worker_pool": worker_pool_time,
}


def get_estimator(model: str) -> Estimator:
    try:
        return ESTIMATORS[model]
    except KeyError:
        known = ", ".join(sorted(ESTIMATORS))
        raise ValueError(f"Unknown estimator model {model!r} (expected one of: {known})") from None


def build_schedule(
    order: Sequence[int],
    tasks: Sequence[Task],
    workers: int,
    model: str = DEFAULT_MODEL,
) -> Schedule:
    """Per-task timing rows for ``order`` under the chosen model.

    For ``index_offset`` the rows carry no worker and ``finish_time`` is the
    completion time of task ``N-1`` (not necessarily the latest row end).
    """
    get_estimator(model)
    if model == "worker_pool":
        return simulate_workers(order, tasks, workers)

    times = completion_times(order, tasks, workers)
    rows = [
        ScheduleRow(
            task=idx,
            start=times[idx] - tasks[idx].duration,
            end=times[idx],
            duration=tasks[idx].duration,
        )
        for idx in order
    ]
    return Schedule(rows=rows, finish_time=times[-1] if times else 0)


def evaluate(
    tasks: Sequence[Task],
    order: Sequence[int],
    workers: int,
    model: str = DEFAULT_MODEL,
    return_schedule: bool = False,
) -> int | tuple[int, Schedule]:
    """Score one ordering, optionally returning its schedule as well."""
    if return_schedule:
        schedule = build_schedule(order, tasks, workers, model)
        return schedule.finish_time, schedule
    return get_estimator(model)(order, tasks, workers)
