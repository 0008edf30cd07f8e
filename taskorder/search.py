"""Exhaustive search for the ordering with the lowest modeled finish time.

The driver is a plain enumerate-filter-reduce loop: every permutation of
the task indices is generated, dependency-invalid ones are dropped, the rest
are scored by the selected estimator and the strictly best one is kept.
Because replacement happens only on a strict improvement, the first
permutation (in generation order) reaching the minimum wins ties.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Optional, Sequence

from taskorder.evaluation import DEFAULT_MODEL, get_estimator
from taskorder.models import NoSolutionError, SearchResult, SearchTimeoutError, Task
from taskorder.operations import (
    check_acyclic,
    is_valid_order,
    validate_permutation,
    validate_tasks,
)
from taskorder.permutations import factorial_count, generate_permutations, iter_permutations

logger = logging.getLogger("taskorder.search")


@dataclass
class SearchState:
    """Best-so-far bookkeeping for one search run."""

    best_order: Optional[list[int]] = None
    best_time: Optional[int] = None
    evaluated: int = 0
    valid: int = 0
    history: list[tuple[int, int]] = field(default_factory=list)
    start_time: float = 0.0

    def update_best(self, order: list[int], finish_time: int) -> bool:
        """Keep ``order`` if it strictly beats the best. Returns True if improved."""
        if self.best_time is None or finish_time < self.best_time:
            self.best_time = finish_time
            self.best_order = list(order)
            self.history.append((self.evaluated, finish_time))
            return True
        return False

    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self.start_time) * 1000)


def search_optimal_order(
    tasks: Sequence[Task],
    workers: int,
    *,
    model: str = DEFAULT_MODEL,
    eager: bool = False,
    detect_cycles: bool = True,
    time_limit_ms: Optional[int] = None,
) -> SearchResult:
    """Enumerate every ordering and return the best dependency-valid one.

    Args:
        tasks: Task list; positions are task indices.
        workers: Worker count fed to the estimator (>= 1).
        model: Estimator name, see :mod:`taskorder.evaluation`.
        eager: Materialise all ``N!`` permutations up front instead of
            streaming them.
        detect_cycles: Reject cyclic dependency graphs before enumerating.
            When False a cyclic graph is only noticed after the whole space
            has been exhausted without a valid ordering.
        time_limit_ms: Optional wall-clock limit checked between
            permutations. When hit, the best ordering so far is returned with
            ``complete=False``.

    Returns:
        SearchResult; ``order`` is ``None`` when no valid ordering exists.

    Raises:
        InvalidTaskError: Malformed task list.
        CyclicDependencyError: Cycle found while ``detect_cycles`` is set.
        ValueError: ``workers < 1`` or unknown ``model``.
    """
    if workers < 1:
        raise ValueError(f"Worker count must be >= 1, got {workers}")
    estimate = get_estimator(model)
    validate_tasks(tasks)
    if detect_cycles:
        check_acyclic(tasks)

    n = len(tasks)
    if n == 0:
        return SearchResult(order=[], finish_time=0, evaluated=0, valid=0)

    logger.info(
        "search start tasks=%d workers=%d model=%s candidates=%d",
        n,
        workers,
        model,
        factorial_count(n),
    )
    state = SearchState(start_time=time.perf_counter())
    limit_s = (time_limit_ms / 1000.0) if time_limit_ms is not None else None
    candidates = generate_permutations(n) if eager else iter_permutations(n)
    complete = True
    for order in candidates:
        if limit_s is not None and (time.perf_counter() - state.start_time) >= limit_s:
            logger.info(
                "search stop time_limit reached evaluated=%d best=%s",
                state.evaluated,
                state.best_time,
            )
            complete = False
            break
        state.evaluated += 1
        if not is_valid_order(order, tasks):
            continue
        state.valid += 1
        finish_time = estimate(order, tasks, workers)
        if state.update_best(order, finish_time):
            logger.debug("improved perm=%d time=%d order=%s", state.evaluated, finish_time, order)

    result = SearchResult(
        order=state.best_order,
        finish_time=state.best_time,
        evaluated=state.evaluated,
        valid=state.valid,
        complete=complete,
        elapsed_ms=state.elapsed_ms(),
        history=state.history,
    )
    if result.found:
        logger.info(
            "search done best=%d order=%s evaluated=%d valid=%d elapsed_ms=%d",
            result.finish_time,
            result.order,
            result.evaluated,
            result.valid,
            result.elapsed_ms,
        )
    elif result.complete:
        logger.warning("search found no valid ordering evaluated=%d", result.evaluated)
    else:
        logger.warning(
            "search stopped by time limit before any valid ordering evaluated=%d",
            result.evaluated,
        )
    return result


def find_optimal_order(tasks: Sequence[Task], workers: int, **kwargs) -> list[int]:
    """Best ordering for ``tasks``; see :func:`search_optimal_order` for options.

    Raises:
        NoSolutionError: If no dependency-valid ordering exists
            (:class:`CyclicDependencyError` when a cycle is detected up front).
        SearchTimeoutError: If ``time_limit_ms`` stopped the search before the
            whole space was examined; the partial result rides on the error.
    """
    result = search_optimal_order(tasks, workers, **kwargs)
    if not result.complete:
        raise SearchTimeoutError(
            f"Time limit reached after {result.evaluated} of "
            f"{factorial_count(len(tasks))} permutations",
            result,
        )
    if not result.found:
        raise NoSolutionError(
            f"No valid ordering among {result.evaluated} permutations of {len(tasks)} tasks"
        )
    return result.order


def evaluate_order(
    tasks: Sequence[Task],
    order: Sequence[int],
    workers: int,
    model: str = DEFAULT_MODEL,
) -> int:
    """Score a caller-supplied ordering.

    Raises:
        InvalidTaskError: Malformed task list.
        ValueError: If ``order`` is not a permutation of the task indices or
            violates a dependency.
    """
    validate_tasks(tasks)
    validate_permutation(order, len(tasks))
    if not is_valid_order(order, tasks):
        raise ValueError(f"Ordering {list(order)} violates task dependencies")
    return get_estimator(model)(order, tasks, workers)
