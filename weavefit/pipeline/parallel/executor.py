# weavefit/pipeline/parallel/executor.py
from __future__ import annotations

import os
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Iterable, Callable, Any

from weavefit.pipeline.parallel.types import ParallelKind
from weavefit.utils.logger import logs


class ParallelExecutor:
    """
    ParallelExecutor

    - thin ProcessPoolExecutor wrapper
    - no persistent state
    - results are returned in ITEM order, whatever the completion order
    - handler exceptions propagate; handlers that must not abort the
      batch return an error record instead of raising
    - initializer(*initargs) runs once per worker process; shared state
      for the handlers travels that way instead of inside every item
      (the sequential path skips it: the caller already holds that state)
    """

    @staticmethod
    def run(
            *,
            kind: ParallelKind,
            items: Iterable[Any],
            handler: Callable[[Any], Any],
            max_workers: int | None = None,
            initializer: Callable[..., None] | None = None,
            initargs: tuple = (),
    ) -> list[Any]:
        items = list(items)
        if not items:
            logs.info("[ParallelExecutor] no items to process")
            return []

        workers = ParallelExecutor._resolve_workers(items, max_workers)

        logs.debug(
            f"[ParallelExecutor] start "
            f"kind={kind.value} total={len(items)} workers={workers}"
        )

        if workers == 1:
            return ParallelExecutor._run_sequential(items, handler)
        return ParallelExecutor._run_parallel(
            items, handler, workers, initializer, initargs
        )

    # ---------------- internal ----------------

    @staticmethod
    def _resolve_workers(items: list[Any], max_workers: int | None) -> int:
        cpu = os.cpu_count() or 1
        if max_workers is None:
            return min(cpu, len(items))
        return max(1, min(max_workers, len(items)))

    @staticmethod
    def _run_sequential(
            items: list[Any],
            handler: Callable[[Any], Any],
    ) -> list[Any]:
        return [handler(item) for item in items]

    @staticmethod
    def _run_parallel(
            items: list[Any],
            handler: Callable[[Any], Any],
            workers: int,
            initializer: Callable[..., None] | None = None,
            initargs: tuple = (),
    ) -> list[Any]:
        results: list[Any] = [None] * len(items)

        with ProcessPoolExecutor(
                max_workers=workers,
                initializer=initializer,
                initargs=initargs,
        ) as pool:
            futures = {
                pool.submit(handler, item): i
                for i, item in enumerate(items)
            }
            for fut in as_completed(futures):
                results[futures[fut]] = fut.result()

        return results
