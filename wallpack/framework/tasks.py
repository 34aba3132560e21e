from __future__ import annotations

import logging
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Callable, Iterable, TypeVar

from .errors import BuildFailedError

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

Task = tuple[str, Callable[[], T]]


def run_supervised(
    tasks: Iterable[Task],
    *,
    workers: int,
    logger: logging.Logger | None = None,
) -> dict[str, T]:
    """
    Run named tasks on a thread pool with at most `workers` in flight.

    After the first failure no further task is submitted; tasks already running
    are allowed to finish. Returns results keyed by task name.

    Raises:
        BuildFailedError: listing every task that raised.
    """
    if workers < 1:
        raise ValueError("workers must be >= 1")

    log = logger or _LOGGER
    results: dict[str, T] = {}
    failures: list[tuple[str, BaseException]] = []
    pending: dict[Future, str] = {}

    def collect(done: Iterable[Future]) -> None:
        for future in done:
            name = pending.pop(future)
            exc = future.exception()
            if exc is None:
                results[name] = future.result()
                continue
            log.error("Task %s failed: %s", name, exc)
            failures.append((name, exc))

    with ThreadPoolExecutor(max_workers=workers) as executor:
        for name, fn in tasks:
            if failures:
                break
            pending[executor.submit(fn)] = name
            if len(pending) >= workers:
                done, _ = wait(pending, return_when=FIRST_COMPLETED)
                collect(done)

        while pending:
            done, _ = wait(pending, return_when=FIRST_COMPLETED)
            collect(done)

    if failures:
        raise BuildFailedError(failures)
    return results
