"""Parallel task runner.

Work items are fanned out over a ``concurrent.futures`` pool. Completed
work comes back to the coordinator as ``WorkerMessage`` values consumed by
a single receive loop, which stores each result at its submission index and
reports progress. Results therefore come back in input order no matter
which worker finishes first.
"""

from __future__ import annotations

import enum
import logging
import os
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Sequence

from circular_scan.errors import TaskError

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int], None]


class MessageKind(enum.Enum):
    FINISH = "finish"
    PROGRESS = "progress"


@dataclass(frozen=True)
class WorkerMessage:
    kind: MessageKind
    index: int
    name: str
    value: Any = None
    completed: int = 0
    total: int = 0


class TaskRunner:
    """Runs stateless work items on a pool of isolated workers."""

    def __init__(self, max_workers: int | None = None, use_processes: bool = True):
        self.max_workers = max_workers or os.cpu_count() or 1
        self.use_processes = use_processes

    def _executor(self, workers: int) -> Executor:
        if self.use_processes:
            return ProcessPoolExecutor(max_workers=workers)
        return ThreadPoolExecutor(max_workers=workers)

    def _receive(
        self,
        futures: dict[Future, int],
        names: Sequence[str],
        phase: str,
    ) -> Iterator[WorkerMessage]:
        total = len(futures)
        completed = 0
        for future in as_completed(futures):
            index = futures[future]
            try:
                value = future.result()
            except Exception as e:
                raise TaskError(phase, e, item=names[index]) from e
            completed += 1
            yield WorkerMessage(MessageKind.FINISH, index, names[index], value=value)
            yield WorkerMessage(
                MessageKind.PROGRESS, index, names[index],
                completed=completed, total=total,
            )

    def map(
        self,
        func: Callable[[Any], Any],
        items: Sequence[Any],
        *,
        names: Sequence[str] | None = None,
        on_progress: ProgressCallback | None = None,
        phase: str = "task",
    ) -> list[Any]:
        """Apply ``func`` to every item in parallel; results keep input order.

        The first failing item aborts the phase: pending work is cancelled,
        running workers are waited for, then ``TaskError`` is raised.
        """
        items = list(items)
        if not items:
            return []
        names = list(names) if names is not None else [str(item) for item in items]
        results: list[Any] = [None] * len(items)
        workers = min(self.max_workers, len(items))
        logger.debug("%s: %d item(s) on %d worker(s)", phase, len(items), workers)

        with self._executor(workers) as executor:
            try:
                futures = {executor.submit(func, item): i for i, item in enumerate(items)}
                for message in self._receive(futures, names, phase):
                    if message.kind is MessageKind.FINISH:
                        results[message.index] = message.value
                    elif on_progress:
                        on_progress(message.name, message.completed, message.total)
            except BaseException:
                executor.shutdown(wait=True, cancel_futures=True)
                raise
        return results

    def run(self, func: Callable[..., Any], *args: Any, phase: str = "task") -> Any:
        """Run one task on its own worker and wait for it."""
        with self._executor(1) as executor:
            future = executor.submit(func, *args)
            try:
                return future.result()
            except Exception as e:
                raise TaskError(phase, e) from e
