"""Parallel k-ary threshold search.

Finds the smallest integer in ``[0, n]`` for which a monotonic predicate holds
(false up to some unknown boundary, true above it). Each recursion level probes
up to ``k`` evenly spaced points concurrently, waits for all of them and narrows
the interval ``(start, end)`` where ``start`` is known to fail (or is the -1
floor) and ``end`` is known to pass (or is the ``n`` ceiling).
"""

import logging
from concurrent.futures import Executor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)

DOMAIN_FLOOR = -1
MIN_CONCURRENCY = 2

Predicate = Callable[[int], bool]
IntervalObserver = Callable[[int, int], None]


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of evaluating the predicate at one point."""
    point: int
    passed: bool


def clamp_concurrency(k: int) -> int:
    return max(MIN_CONCURRENCY, k)


def probe_points(start: int, end: int, k: int) -> List[int]:
    """Points to probe for the interval ``(start, end)``.

    Generated as ``start + i * chunk`` for ``i`` from ``k`` down to 1. Points
    that are not strictly inside the interval are dropped, so at most
    ``end - start - 1`` probes are issued.
    """
    width = end - start
    if width > k:
        chunk, count = width // k, k
    else:
        chunk, count = 1, width

    points = (start + i * chunk for i in range(count, 0, -1))
    return [p for p in points if start < p < end]


def fold(start: int, end: int, result: ProbeResult) -> Tuple[int, int]:
    """Tighten ``(start, end)`` with one probe result.

    Results outside the current interval never loosen it, so duplicates and
    arbitrary arrival order are harmless.
    """
    if start < result.point < end:
        if result.passed:
            return start, result.point
        return result.point, end
    return start, end


def _probe(predicate: Predicate, point: int) -> ProbeResult:
    return ProbeResult(point=point, passed=bool(predicate(point)))


def narrow(
    start: int,
    end: int,
    k: int,
    predicate: Predicate,
    executor: Executor,
    on_interval: Optional[IntervalObserver] = None,
) -> int:
    """Recursively narrow ``(start, end)`` and return the smallest passing point.

    Every probe of a level must finish before the next level starts. An
    exception raised by the predicate aborts the search.
    """
    if on_interval is not None:
        on_interval(start, end)

    if end - start <= 1:
        return end

    points = probe_points(start, end, k)
    logger.debug(f"Probing ({start}, {end}) at {points}")

    futures = [executor.submit(_probe, predicate, p) for p in points]
    for future in as_completed(futures):
        start, end = fold(start, end, future.result())

    return narrow(start, end, k, predicate, executor, on_interval)


def kary_search(
    n: int,
    k: int,
    predicate: Predicate,
    executor: Optional[Executor] = None,
    on_interval: Optional[IntervalObserver] = None,
) -> int:
    """Smallest point in ``[0, n]`` where ``predicate`` holds, ``n`` if none below it does.

    Args:
        n: Domain ceiling, treated as passing without being probed.
        k: Probes per level; values below 2 are clamped to 2.
        predicate: Monotonic, thread-safe verdict function.
        executor: Pool to run probes on. A thread pool of ``k`` workers is
            created for the duration of the search when omitted.
        on_interval: Called with ``(start, end)`` at every recursion entry.
    """
    k = clamp_concurrency(k)

    if executor is not None:
        return narrow(DOMAIN_FLOOR, n, k, predicate, executor, on_interval)

    with ThreadPoolExecutor(max_workers=k, thread_name_prefix="probe") as pool:
        return narrow(DOMAIN_FLOOR, n, k, predicate, pool, on_interval)
