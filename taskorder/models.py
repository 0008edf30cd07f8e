"""Core data structures for task-ordering instances.

This module defines:
    Task         -- immutable description of one unit of work.
    Schedule     -- modeled timing of one ordering (rows + finish time).
    SearchResult -- outcome of an exhaustive ordering search.

and the exceptions raised across the package.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional


class InvalidTaskError(ValueError):
    """Task list is malformed (bad duration, unknown or self dependency)."""


class NoSolutionError(Exception):
    """No dependency-valid ordering exists for the given tasks."""


class SearchTimeoutError(TimeoutError):
    """Time limit stopped the search before every ordering was examined.

    Attributes:
        result: The partial :class:`SearchResult` (best so far may be set).
    """

    def __init__(self, message: str, result: "SearchResult"):
        self.result = result
        super().__init__(message)


class CyclicDependencyError(NoSolutionError):
    """Dependency graph contains a cycle.

    Attributes:
        cycle: Task indices along the detected cycle; the first index is
            repeated at the end, e.g. ``[0, 1, 0]``.
    """

    def __init__(self, cycle: list[int]):
        self.cycle = list(cycle)
        path = " -> ".join(map(str, self.cycle))
        super().__init__(f"Cyclic dependency: {path}")


@dataclass(frozen=True)
class Task:
    """Immutable task record.

    Attributes:
        duration: Cost of executing the task in isolation (>= 0).
        depends: Indices of tasks that must complete before this one starts.
    """

    duration: int
    depends: frozenset[int] = frozenset()

    def __post_init__(self) -> None:
        # accept any iterable of indices, store as frozenset
        object.__setattr__(self, "depends", frozenset(self.depends))

    @classmethod
    def from_mapping(cls, raw: Mapping) -> "Task":
        """Build a task from ``{"duration": int, "depends": [int, ...]}``."""
        if "duration" not in raw:
            raise ValueError(f"Task entry without 'duration': {raw!r}")
        depends: Optional[Iterable[int]] = raw.get("depends")
        if depends is None:
            depends = ()
        elif not isinstance(depends, (list, tuple, set, frozenset)):
            raise ValueError(f"Task 'depends' must be a list of indices, got {depends!r}")
        return cls(duration=raw["duration"], depends=frozenset(depends))


@dataclass(frozen=True)
class ScheduleRow:
    """Modeled timing of a single task.

    Fields:
        task: Task index.
        start: Modeled start time.
        end: Modeled finish time (start + duration).
        duration: Task duration.
        worker: Worker the task was assigned to, ``None`` when the estimator
            does not model individual workers.
    """

    task: int
    start: int
    end: int
    duration: int
    worker: Optional[int] = None


@dataclass(frozen=True)
class Schedule:
    """Rows in ordering sequence plus the estimator's finish time."""

    rows: list[ScheduleRow]
    finish_time: int


@dataclass
class SearchResult:
    """Outcome of :func:`taskorder.search.search_optimal_order`.

    ``order`` and ``finish_time`` are ``None`` when no dependency-valid
    ordering was found.
    """

    order: Optional[list[int]]
    finish_time: Optional[int]
    evaluated: int = 0
    valid: int = 0
    complete: bool = True
    elapsed_ms: int = 0
    history: list[tuple[int, int]] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.order is not None
