"""Thread-pool execution for independent per-file jobs."""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")
R = TypeVar("R")

# Fewer items than this run sequentially
MIN_PARALLEL_ITEMS = 2


@dataclass
class ParallelConfig:
    """Configuration for parallel file processing."""

    max_workers: int = 1

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            self.max_workers = 1
        elif self.max_workers > 32:
            self.max_workers = 32

    @property
    def enabled(self) -> bool:
        return self.max_workers > 1


def run_ordered(
    func: Callable[[T], R],
    items: list[T],
    config: ParallelConfig | None = None,
    on_done: Callable[[int, R], None] | None = None,
) -> list[R]:
    """
    Apply a function to every item, returning results in input order.

    Items run on a thread pool when the config allows it. ``on_done`` is
    called as each item finishes, with its index, so callers can report
    progress before the whole batch completes. Exceptions from ``func``
    propagate; callers wrap their work so it does not raise.

    Args:
        func: Function to apply to each item
        items: Items to process
        config: Parallel execution configuration
        on_done: Optional completion callback

    Returns:
        Results in the same order as items
    """
    if config is None:
        config = ParallelConfig()

    n = len(items)
    results: list[R | None] = [None] * n

    if not config.enabled or n < MIN_PARALLEL_ITEMS:
        for i, item in enumerate(items):
            results[i] = func(item)
            if on_done is not None:
                on_done(i, results[i])  # type: ignore[arg-type]
        return results  # type: ignore[return-value]

    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        future_to_idx = {executor.submit(func, item): i for i, item in enumerate(items)}

        for future in as_completed(future_to_idx):
            idx = future_to_idx[future]
            results[idx] = future.result()
            if on_done is not None:
                on_done(idx, results[idx])  # type: ignore[arg-type]

    return results  # type: ignore[return-value]
