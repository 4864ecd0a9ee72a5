"""Helpers for working through large inputs in fixed-size batches."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, List, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_BATCH_SIZE = 50


@dataclass
class BatchFailure:
    item: Any
    error: BaseException


@dataclass
class BatchResult(Generic[R]):
    successful: List[R] = field(default_factory=list)
    failed: List[BatchFailure] = field(default_factory=list)
    total_batches: int = 0
    elapsed_ms: float = 0.0


# PUBLIC_INTERFACE
def chunk(items: Sequence[T], size: int) -> List[List[T]]:
    """Split ``items`` into consecutive lists of at most ``size`` elements."""
    if size < 1:
        raise ValueError("size must be at least 1")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


# PUBLIC_INTERFACE
async def process_in_batches(
    items: Sequence[T],
    processor: Callable[[List[T]], Awaitable[Sequence[R]]],
    batch_size: int = DEFAULT_BATCH_SIZE,
    delay: float = 0,
    continue_on_error: bool = False,
) -> BatchResult[R]:
    """
    Feed ``items`` to ``processor`` one batch at a time.

    Parameters:
        processor: coroutine receiving a batch and returning its results
        batch_size: items per batch
        delay: seconds to sleep between batches (not after the last one)
        continue_on_error: when True, every item of a failed batch is recorded
            in ``failed`` and processing moves on; otherwise the error propagates.
    """
    batches = chunk(items, batch_size)
    result: BatchResult[R] = BatchResult(total_batches=len(batches))
    started = time.perf_counter()

    for index, batch in enumerate(batches):
        try:
            result.successful.extend(await processor(batch))
        except Exception as exc:
            if not continue_on_error:
                raise
            logger.warning("Batch %d of %d failed: %s", index + 1, len(batches), exc)
            result.failed.extend(BatchFailure(item=item, error=exc) for item in batch)
        if delay > 0 and index < len(batches) - 1:
            await asyncio.sleep(delay)

    result.elapsed_ms = (time.perf_counter() - started) * 1000
    return result
