# tgrelay/tasks.py
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Callable, Optional, Set


class DeferredTasks:
    """
    Fire-and-forget work that outlives the request that scheduled it.

    Tasks are not retried, ordered or cancellable. A failing task is
    logged under its name and otherwise ignored; nothing ever reaches
    the client that triggered it.
    """

    def __init__(self, max_workers: int = 4) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="relay-task"
        )
        self._pending: Set[Future] = set()
        self._lock = threading.Lock()

    @staticmethod
    def _run(name: str, fn: Callable[..., Any], args, kwargs) -> Any:
        try:
            return fn(*args, **kwargs)
        except Exception as e:  # noqa: BLE001
            logging.exception("[TASK] %s failed: %s", name, e)
            return None

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def submit(self, name: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        future = self._executor.submit(self._run, name, fn, args, kwargs)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)
        return future

    def drain(self, timeout: Optional[float] = None) -> None:
        """
        Block until every task scheduled so far has finished.
        """
        with self._lock:
            pending = set(self._pending)
        if pending:
            wait(pending, timeout=timeout)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)
