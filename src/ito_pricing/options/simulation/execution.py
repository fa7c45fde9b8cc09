"""
Execution strategy selection and fork-join helpers.

The simulation engine runs either a single-threaded pass or a
data-parallel pass over its sample. Parallel stages are fork-join over a
thread pool: NumPy ufuncs release the GIL, and each task writes into its
own disjoint slice of a preallocated array, so no locks are needed.
"""

import os
from concurrent.futures import Executor, Future
from enum import Enum
from typing import Callable, Iterable, Optional, Union

import numpy as np

from ito_pricing.config.settings import SETTINGS
from ito_pricing.errors import InvalidParameterError


class ExecutionPolicy(Enum):
    """How the engine schedules its map stages."""

    AUTO = "auto"  # Decide from trial count
    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"

    @classmethod
    def coerce(cls, policy: Union["ExecutionPolicy", str]) -> "ExecutionPolicy":
        """Accept an ExecutionPolicy or its string value."""
        if isinstance(policy, cls):
            return policy
        try:
            return cls(str(policy).lower())
        except ValueError:
            valid = ", ".join(p.value for p in cls)
            raise InvalidParameterError(
                f"CRITICAL: policy must be one of {valid}, got {policy!r}"
            ) from None


def resolve_policy(
    policy: ExecutionPolicy,
    n_trials: int,
    threshold: int = SETTINGS.simulation.parallel_threshold,
) -> ExecutionPolicy:
    """
    Pick the concrete strategy for one pricing call.

    Parameters
    ----------
    policy : ExecutionPolicy
        Configured policy
    n_trials : int
        Sample size
    threshold : int, default 10000
        AUTO goes parallel at or above this many trials

    Returns
    -------
    ExecutionPolicy
        SEQUENTIAL or PARALLEL, never AUTO
    """
    if policy == ExecutionPolicy.AUTO:
        return ExecutionPolicy.PARALLEL if n_trials >= threshold else ExecutionPolicy.SEQUENTIAL
    return policy


def resolve_max_workers(max_workers: Optional[int] = None) -> int:
    """Explicit value, else settings/env override, else CPU count."""
    if max_workers is not None:
        return max_workers
    if SETTINGS.simulation.max_workers is not None:
        return SETTINGS.simulation.max_workers
    return os.cpu_count() or 1


def chunk_slices(
    n_items: int,
    n_workers: int,
    min_chunk_size: int = SETTINGS.simulation.min_chunk_size,
) -> list[slice]:
    """
    Split range(n_items) into contiguous slices, at most one per worker.

    Parameters
    ----------
    n_items : int
        Length of the array to split
    n_workers : int
        Upper bound on number of slices
    min_chunk_size : int
        Slices are not made smaller than this (except when n_items is)

    Returns
    -------
    list[slice]
        Disjoint slices covering [0, n_items) in order
    """
    if n_items <= 0:
        return []
    n_chunks = max(1, min(n_workers, n_items // max(min_chunk_size, 1)))
    bounds = np.linspace(0, n_items, n_chunks + 1, dtype=np.int64)
    return [slice(int(lo), int(hi)) for lo, hi in zip(bounds[:-1], bounds[1:])]


def fork_join(executor: Executor, tasks: Iterable[Callable[[], object]]) -> None:
    """
    Submit every task, then wait for all of them.

    The first worker exception is re-raised after all tasks have been
    submitted. No ordering between tasks is assumed.
    """
    futures: list[Future] = [executor.submit(task) for task in tasks]
    for future in futures:
        future.result()
