"""Parallel map and associative reduce over in-memory collections.

Work items are processed by independent joblib workers with no ordering
guarantee between them. Results are returned in input order, and partial
results are folded with a combine function that must be associative and
commutative so the outcome does not depend on how the input was chunked.
"""
from __future__ import annotations

from functools import reduce
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, TypeVar

from joblib import Parallel, delayed
from tqdm.auto import tqdm

T = TypeVar("T")
R = TypeVar("R")
A = TypeVar("A")


def chunked(items: Sequence[T], chunk_size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive slices of ``items`` holding at most ``chunk_size`` elements."""

    if chunk_size < 1:
        raise ValueError("chunk_size must be positive")
    for start in range(0, len(items), chunk_size):
        yield items[start : start + chunk_size]


def parallel_map(
    fn: Callable[[T], R],
    items: Iterable[T],
    num_workers: int = 1,
    progress: bool = False,
    desc: Optional[str] = None,
) -> List[R]:
    """Apply ``fn`` to every item, optionally on a pool of worker threads.

    Workers are threads, so ``fn`` does not have to be picklable.
    """

    items = list(items)
    if num_workers <= 1 or len(items) <= 1:
        iterator = tqdm(items, desc=desc, disable=not progress)
        return [fn(item) for item in iterator]

    results = Parallel(n_jobs=num_workers, prefer="threads", return_as="generator")(
        delayed(fn)(item) for item in items
    )
    return list(tqdm(results, total=len(items), desc=desc, disable=not progress))


def map_reduce(
    map_chunk: Callable[[Sequence[T]], A],
    combine: Callable[[A, A], A],
    initial: A,
    items: Sequence[T],
    chunk_size: int = 1000,
    num_workers: int = 1,
    progress: bool = False,
    desc: Optional[str] = None,
) -> A:
    """Reduce ``items`` chunk by chunk, then fold the partial results.

    ``initial`` must be the identity of ``combine``.
    """

    items = list(items)
    partials = parallel_map(
        map_chunk,
        list(chunked(items, chunk_size)),
        num_workers=num_workers,
        progress=progress,
        desc=desc,
    )
    return reduce(combine, partials, initial)


__all__ = ["chunked", "parallel_map", "map_reduce"]
