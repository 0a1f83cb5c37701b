"""Fixed-width batches with a pause between them.

Every call in batch N finishes before batch N+1 is submitted, and
``sleep(pacing_seconds)`` runs between consecutive batches. This is a
politeness contract with the image CDN, so batches never overlap.
"""
import concurrent.futures
import logging
import time
from typing import Callable, Iterator, List, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")

log = logging.getLogger("alliancelogos.batching")


def chunked(items: Sequence[T], size: int) -> Iterator[List[T]]:
    if size < 1:
        raise ValueError(f"batch size must be >= 1, got {size}")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


def run_in_batches(
    items: Sequence[T],
    worker: Callable[[T], R],
    width: int,
    pacing_seconds: float,
    sleep: Callable[[float], None] = time.sleep,
) -> List[R]:
    """Run ``worker`` over ``items`` and return the results in item order.

    Exceptions raised by ``worker`` propagate; callers that need
    per-item isolation catch inside the worker.
    """
    items = list(items)
    batches = list(chunked(items, width))
    results: List[R] = []

    with concurrent.futures.ThreadPoolExecutor(max_workers=width) as executor:
        for index, batch in enumerate(batches):
            if index:
                sleep(pacing_seconds)
            futures = [executor.submit(worker, item) for item in batch]
            concurrent.futures.wait(futures)
            results.extend(future.result() for future in futures)
            log.debug("Batch %s/%s done (%s items)", index + 1, len(batches), len(batch))

    return results
