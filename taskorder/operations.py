"""Task-list and ordering checks.

Concepts
--------
Ordering
    A list of task indices containing every index ``0..N-1`` exactly once.
Valid ordering
    An ordering in which every dependency of a task appears at an earlier
    position than the task itself.

Input-shape validation (:func:`validate_tasks`) and cycle detection
(:func:`find_cycle`) run once before a search; :func:`is_valid_order` runs
for every candidate and therefore never raises.
"""

from __future__ import annotations

import heapq
from typing import Optional, Sequence

from taskorder.models import CyclicDependencyError, InvalidTaskError, Task


def validate_tasks(tasks: Sequence[Task]) -> None:
    """Reject malformed task lists before any search is attempted.

    Raises:
        InvalidTaskError: If a duration is not a non-negative integer, a
            dependency index points outside the task list, or a task depends
            on itself.
    """
    n = len(tasks)
    for idx, task in enumerate(tasks):
        duration = task.duration
        if isinstance(duration, bool) or not isinstance(duration, int):
            raise InvalidTaskError(f"Task {idx}: duration must be an integer, got {duration!r}")
        if duration < 0:
            raise InvalidTaskError(f"Task {idx}: negative duration {duration}")
        for dep in task.depends:
            if isinstance(dep, bool) or not isinstance(dep, int):
                raise InvalidTaskError(f"Task {idx}: dependency must be an index, got {dep!r}")
            if dep == idx:
                raise InvalidTaskError(f"Task {idx} depends on itself")
            if not (0 <= dep < n):
                raise InvalidTaskError(f"Task {idx}: dependency index out of range: {dep}")


def find_cycle(tasks: Sequence[Task]) -> Optional[list[int]]:
    """Return one dependency cycle as a closed path, or ``None``.

    Depth-first search over ``task -> dependency`` edges with an on-stack
    marker; tasks and dependencies are visited in ascending index order so
    the reported cycle is deterministic. Assumes :func:`validate_tasks`
    passed.
    """
    # 0 = unvisited, 1 = on the current path, 2 = done
    state = [0] * len(tasks)
    path: list[int] = []

    def visit(idx: int) -> Optional[list[int]]:
        state[idx] = 1
        path.append(idx)
        for dep in sorted(tasks[idx].depends):
            if state[dep] == 1:
                return path[path.index(dep):] + [dep]
            if state[dep] == 0:
                cycle = visit(dep)
                if cycle is not None:
                    return cycle
        path.pop()
        state[idx] = 2
        return None

    for idx in range(len(tasks)):
        if state[idx] == 0:
            cycle = visit(idx)
            if cycle is not None:
                return cycle
    return None


def check_acyclic(tasks: Sequence[Task]) -> None:
    """Raise :class:`CyclicDependencyError` if the dependency graph has a cycle."""
    cycle = find_cycle(tasks)
    if cycle is not None:
        raise CyclicDependencyError(cycle)


def is_valid_order(order: Sequence[int], tasks: Sequence[Task]) -> bool:
    """True iff every task's dependencies appear before it in ``order``."""
    completed = [False] * len(tasks)
    for idx in order:
        for dep in tasks[idx].depends:
            if not completed[dep]:
                return False
        completed[idx] = True
    return True


def validate_permutation(order: Sequence[int], n: int) -> bool:
    """Check that ``order`` is a permutation of ``0..n-1``.

    Returns:
        True if the ordering is complete (handy inside assertions).

    Raises:
        ValueError: On wrong length, out-of-range index or duplicate.
    """
    if len(order) != n:
        raise ValueError(f"Ordering has {len(order)} entries, expected {n}")
    seen = [False] * n
    for idx in order:
        if isinstance(idx, bool) or not isinstance(idx, int) or not (0 <= idx < n):
            raise ValueError(f"Task index out of range: {idx!r}")
        if seen[idx]:
            raise ValueError(f"Duplicate task index in ordering: {idx}")
        seen[idx] = True
    return True


def topological_order(tasks: Sequence[Task]) -> list[int]:
    """Kahn's algorithm, always releasing the lowest ready index first.

    Gives a deterministic valid baseline for acyclic inputs.

    Raises:
        CyclicDependencyError: If not every task can be released.
    """
    n = len(tasks)
    missing = [len(task.depends) for task in tasks]
    dependants: list[list[int]] = [[] for _ in range(n)]
    for idx, task in enumerate(tasks):
        for dep in task.depends:
            dependants[dep].append(idx)

    ready = [idx for idx in range(n) if missing[idx] == 0]
    heapq.heapify(ready)
    order: list[int] = []
    while ready:
        idx = heapq.heappop(ready)
        order.append(idx)
        for nxt in dependants[idx]:
            missing[nxt] -= 1
            if missing[nxt] == 0:
                heapq.heappush(ready, nxt)

    if len(order) != n:
        raise CyclicDependencyError(find_cycle(tasks) or [])
    return order
