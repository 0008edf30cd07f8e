"""Exhaustive search for the best dependency-respecting task order.

Exports the task model, the search entry points and the exceptions.
"""

from taskorder.models import (  # noqa: F401
    CyclicDependencyError,
    InvalidTaskError,
    NoSolutionError,
    SearchResult,
    SearchTimeoutError,
    Task,
)
from taskorder.search import find_optimal_order, search_optimal_order  # noqa: F401

__all__ = [
    "CyclicDependencyError",
    "InvalidTaskError",
    "NoSolutionError",
    "SearchResult",
    "SearchTimeoutError",
    "Task",
    "find_optimal_order",
    "search_optimal_order",
]
