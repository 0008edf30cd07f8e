"""Permutation generation by recursive insertion.

Permutations of size ``n`` are built from every permutation of size ``n - 1``
by inserting the value ``n - 1`` at each of the ``n`` positions, left to
right. The eager and streaming variants produce identical sequences in
identical order, so the search's tie-break does not depend on which one is
used.
"""

from __future__ import annotations

from typing import Iterator


def _check_size(n: int) -> None:
    if n < 0:
        raise ValueError(f"Permutation size must be >= 0, got {n}")


def generate_permutations(n: int) -> list[list[int]]:
    """Return all ``n!`` permutations of ``0..n-1``.

    ``n == 0`` yields a single empty permutation.
    """
    _check_size(n)
    if n == 0:
        return [[]]
    if n == 1:
        return [[0]]

    perms: list[list[int]] = []
    for perm in generate_permutations(n - 1):
        for i in range(n):
            perms.append(perm[:i] + [n - 1] + perm[i:])
    return perms


def iter_permutations(n: int) -> Iterator[list[int]]:
    """Stream the permutations of :func:`generate_permutations` one at a time.

    Every yielded list is a fresh object; callers may keep or mutate it.
    """
    _check_size(n)
    return _insertions(n)


def _insertions(n: int) -> Iterator[list[int]]:
    if n == 0:
        yield []
        return
    if n == 1:
        yield [0]
        return
    for perm in _insertions(n - 1):
        for i in range(n):
            yield perm[:i] + [n - 1] + perm[i:]


def factorial_count(n: int) -> int:
    """Size of the candidate space for ``n`` tasks."""
    _check_size(n)
    count = 1
    for k in range(2, n + 1):
        count *= k
    return count
